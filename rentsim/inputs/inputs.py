# rentsim/inputs/inputs.py
"""
Inputs loader for rentsim.

Goals
-----
- File-first inputs validated with Pydantic.
- Accepts a bare InvestmentParams JSON (root = parameters) as well as a
  structured shape that also carries run options.
- Small set of environment overrides for CI/CLI convenience.

Supported JSON shapes
---------------------
1) Bare (root = InvestmentParams, snake_case or camelCase keys)
   {
     "purchasePrice": 300000, "expectedRent": 1200, ...
   }

2) Structured (root = AppInputs)
   {
     "inputs": { ... InvestmentParams ... },
     "run": {
       "out": "investment_analysis.md",
       "optimize": false,
       "horizon_months": 480
     }
   }

Environment overrides (optional)
--------------------------------
- RENTSIM_OUT             -> AppInputs.run.out
- RENTSIM_OPTIMIZE        -> AppInputs.run.optimize ("1", "true", "yes")
- RENTSIM_HORIZON_MONTHS  -> AppInputs.run.horizon_months (int)

Public API
----------
- class InputsLoader:
    - load(path: str | Path | None) -> AppInputs
    - load_json(text: str) -> AppInputs
    - with_overrides(**kwargs) -> AppInputs (non-destructive copies)
- function load_inputs(path: str | Path | None) -> AppInputs  (convenience)
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, Field, ValidationError

from rentsim.schemas.models import InvestmentParams

_TRUTHY = ("1", "true", "yes", "on")

# ----------------------------
# Pydantic models for structured inputs
# ----------------------------


class RunOptions(BaseModel):
    """Runtime (non-financial) options controlling the analysis run."""

    out: str = Field("investment_analysis.md", description="Path to write the Markdown report.")
    optimize: bool = Field(False, description="Solve payment/rent for the target cash flow before simulating.")
    horizon_months: int = Field(480, ge=12, le=1200, description="Last month index of the padded debt schedule.")


class AppInputs(BaseModel):
    """
    Full input payload.

    Attributes:
        inputs: The validated InvestmentParams used by the engine.
        run:    Non-financial, runtime options for the current execution.
    """

    inputs: InvestmentParams
    run: RunOptions = RunOptions()


# ----------------------------
# Loader
# ----------------------------


@dataclass(frozen=True)
class InputsLoader:
    """
    File-first inputs loader with light env overrides.

    Default search (when path=None):
        1) ./data/sample/inputs.json
        2) ./config.json
    """

    env_prefix: str = "RENTSIM_"

    # ---------- Public API ----------

    def load(self, path: str | Path | None = None) -> AppInputs:
        """Load inputs from a JSON file; with path=None, try the default locations."""
        p = self._resolve_path(path)
        raw = self._read_json_file(p)
        cfg = self._parse_root(self._wrap_bare(raw))
        return self._apply_env_overrides(cfg)

    def load_json(self, text: str) -> AppInputs:
        """Load inputs from a JSON string (bare or structured shape)."""
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON payload: {e}") from e
        if not isinstance(raw, dict):
            raise ValueError("Invalid JSON payload: expected an object at the root")
        cfg = self._parse_root(self._wrap_bare(raw))
        return self._apply_env_overrides(cfg)

    def with_overrides(
        self,
        cfg: AppInputs,
        *,
        out: str | None = None,
        optimize: bool | None = None,
        horizon_months: int | None = None,
    ) -> AppInputs:
        """
        Return a *new* AppInputs with provided non-null overrides applied to RunOptions.
        Does not mutate the original instance.
        """
        updates: dict[str, Any] = {}
        if out is not None:
            updates["out"] = out
        if optimize is not None:
            updates["optimize"] = optimize
        if horizon_months is not None:
            updates["horizon_months"] = horizon_months

        if not updates:
            return cfg

        try:
            run_new = RunOptions.model_validate({**cfg.run.model_dump(), **updates})
        except ValidationError as e:
            raise ValueError(f"Invalid run option override:\n{e}") from e
        return cfg.model_copy(update={"run": run_new})

    # ---------- Internals ----------

    def _resolve_path(self, path: str | Path | None) -> Path:
        if path is not None:
            p = Path(path)
            if not p.exists():
                raise FileNotFoundError(f"Inputs file not found: {p}")
            return p

        for candidate in (Path("data/sample/inputs.json"), Path("config.json")):
            if candidate.exists():
                return candidate
        raise FileNotFoundError(
            "No inputs path provided and no default inputs found. Looked for ./data/sample/inputs.json and ./config.json."
        )

    def _read_json_file(self, p: Path) -> dict[str, Any]:
        if p.suffix.lower() != ".json":
            raise ValueError(f"Unsupported inputs format for {p.name}; only .json is supported.")
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {p}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid JSON in {p}: expected an object at the root")
        return cast(dict[str, Any], data)

    def _wrap_bare(self, raw: dict[str, Any]) -> dict[str, Any]:
        if "inputs" in raw:
            return raw
        return {"inputs": raw}

    def _parse_root(self, data: dict[str, Any]) -> AppInputs:
        try:
            return AppInputs.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Inputs validation failed:\n{e}") from e

    def _apply_env_overrides(self, cfg: AppInputs) -> AppInputs:
        prefix = self.env_prefix
        updates: dict[str, Any] = {}

        out = os.getenv(f"{prefix}OUT")
        if out:
            updates["out"] = out

        optimize = os.getenv(f"{prefix}OPTIMIZE")
        if optimize:
            updates["optimize"] = optimize.strip().lower() in _TRUTHY

        horizon = os.getenv(f"{prefix}HORIZON_MONTHS")
        if horizon:
            try:
                value = int(horizon)
            except ValueError:
                value = None
            # Ignore bad or out-of-range values; keep validated cfg value
            if value is not None and 12 <= value <= 1200:
                updates["horizon_months"] = value

        if not updates:
            return cfg

        run_new = cfg.run.model_copy(update=updates)
        return cfg.model_copy(update={"run": run_new})


# ----------------------------
# Convenience function
# ----------------------------


def load_inputs(path: str | Path | None = None) -> AppInputs:
    """Convenience wrapper for one-shot callers."""
    return InputsLoader().load(path)
