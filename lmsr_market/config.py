import logging
import os

from dotenv import load_dotenv
from typing_extensions import TypedDict

ENV_PREFIX = 'LMSR_'

class MarketParams(TypedDict):
    default_liquidity: int  # whole collateral units, scaled by collateral decimals at creation
    default_fee_bps: int
    collateral_decimals: int
    log_level: str

def get_default_market_params() -> MarketParams:
    return MarketParams(
        default_liquidity=1000,
        default_fee_bps=100,
        collateral_decimals=9,
        log_level='INFO',
    )

def _int_env(env: dict[str, str], key: str) -> int:
    value = env[key]
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Environment variable {ENV_PREFIX}{key.upper()} must be an integer, got {value!r}")

def load_env() -> dict[str, str]:
    # Try to load from .env file (for local development)
    load_dotenv()

    optional_vars = ['DEFAULT_LIQUIDITY', 'DEFAULT_FEE_BPS', 'COLLATERAL_DECIMALS', 'LOG_LEVEL']
    env_vars = {}
    for key in optional_vars:
        value = os.getenv(ENV_PREFIX + key)
        if value is not None:
            env_vars[key.lower()] = value
    return env_vars

def get_market_params() -> MarketParams:
    """Defaults overridden by LMSR_* environment variables."""
    params = get_default_market_params()
    env = load_env()
    for key in ('default_liquidity', 'default_fee_bps', 'collateral_decimals'):
        if key in env:
            params[key] = _int_env(env, key)
    if 'log_level' in env:
        params['log_level'] = env['log_level'].upper()

    if params['default_liquidity'] <= 0:
        raise ValueError("LMSR_DEFAULT_LIQUIDITY must be >0")
    if params['collateral_decimals'] < 0:
        raise ValueError("LMSR_COLLATERAL_DECIMALS must be >=0")
    return params

def configure_logging(params: MarketParams | None = None) -> None:
    params = params or get_market_params()
    logging.basicConfig(
        level=getattr(logging, params['log_level'], logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
