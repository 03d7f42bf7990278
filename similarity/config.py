"""YAML configuration loading with inheritance.

Supports a `base:` key for config inheritance with deep merge, so a
Mach-number sweep can share one base case.
"""

import copy
from pathlib import Path

import yaml

from similarity.equations import SimilarityParameters
from similarity.gas import GasConstants


def _deep_merge(base, overrides):
    """Recursively merge overrides into base dict.

    - Scalars in overrides replace base values
    - Dicts are merged recursively
    - None values in overrides remove the key
    """
    result = copy.deepcopy(base)
    for key, value in overrides.items():
        if value is None:
            result.pop(key, None)
        elif isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _resolve_config(name, raw, all_raw, resolved_cache, chain=()):
    """Resolve a single config, following base references.

    Parameters
    ----------
    name : str
        Config name.
    raw : dict
        Raw config dict.
    all_raw : dict
        All raw configs (for base resolution).
    resolved_cache : dict
        Cache of already-resolved configs.
    chain : tuple of str
        Names being resolved above this one, to catch cycles.

    Returns
    -------
    dict : Resolved config (base fields merged in).
    """
    if name in resolved_cache:
        return resolved_cache[name]
    if name in chain:
        raise ValueError(
            f"Config inheritance cycle: {' -> '.join(chain + (name,))}")

    if 'base' in raw:
        base_name = raw['base']
        if base_name not in all_raw:
            raise ValueError(f"Config '{name}' references unknown base '{base_name}'")
        base_resolved = _resolve_config(
            base_name, all_raw[base_name], all_raw, resolved_cache,
            chain + (name,),
        )
        overrides = {k: v for k, v in raw.items() if k != 'base'}
        resolved = _deep_merge(base_resolved, overrides)
    else:
        resolved = copy.deepcopy(raw)

    resolved_cache[name] = resolved
    return resolved


def load_config(path):
    """Load similarity run configurations from YAML.

    Supports:
    - Single config: `similarity:` top-level key
    - Multiple configs: `configs:` top-level key with inheritance
    - Output control: `outputs:` list ('profile', 'plot', 'summary')

    Parameters
    ----------
    path : str or Path
        Path to YAML config file.

    Returns
    -------
    dict with keys:
        configs : dict of {name: resolved_config}
        outputs : list of output types
    """
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raise ValueError(f"Empty config file: {path}")
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must hold a mapping: {path}")

    if 'similarity' in raw and 'configs' not in raw:
        configs_raw = {'default': raw['similarity']}
    elif 'configs' in raw:
        configs_raw = raw['configs']
    else:
        configs_raw = {'default': {k: v for k, v in raw.items()
                                   if k != 'outputs'}}

    resolved_cache = {}
    configs = {}
    for name, cfg in configs_raw.items():
        configs[name] = _resolve_config(name, cfg or {}, configs_raw,
                                        resolved_cache)

    outputs = raw.get('outputs', ['profile', 'plot', 'summary'])

    return {
        'configs': configs,
        'outputs': outputs,
    }


_FLOAT_KEYS = ('mach', 't_inf', 'eta_max', 'eps_profile', 'eps_bc',
               'alpha0', 'beta0', 'delta')
_INT_KEYS = ('n', 'itermax')
_GAS_KEYS = ('gamma', 'sutherland_c', 'prandtl')


def build_parameters(cfg):
    """Convert a resolved config dict into SimilarityParameters.

    Missing keys take the solver defaults (M∞=1, T∞=300 K, η_max=10,
    N=50, itermax=40, tolerances 1e-6).

    Parameters
    ----------
    cfg : dict
        Resolved config from load_config.

    Returns
    -------
    SimilarityParameters

    Raises
    ------
    ValueError
        Unknown keys or out-of-range values.
    """
    unknown = set(cfg) - set(_FLOAT_KEYS) - set(_INT_KEYS) - {'gas'}
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    kwargs = {}
    for key in _FLOAT_KEYS:
        if key in cfg:
            kwargs[key] = float(cfg[key])
    for key in _INT_KEYS:
        if key in cfg:
            value = cfg[key]
            if isinstance(value, float) and not value.is_integer():
                raise ValueError(f"{key} must be an integer, got {value}")
            kwargs[key] = int(value)

    gas_cfg = cfg.get('gas') or {}
    unknown = set(gas_cfg) - set(_GAS_KEYS)
    if unknown:
        raise ValueError(
            f"Unknown gas keys: {', '.join(sorted(unknown))}")
    kwargs['gas'] = GasConstants(**{k: float(v) for k, v in gas_cfg.items()})

    return SimilarityParameters(**kwargs)
