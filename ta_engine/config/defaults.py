"""Default configuration parameters for the technical analysis engine."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MovingAverageParams:
    """Simple moving average parameters."""
    periods: tuple[int, ...] = (25, 50, 200)


@dataclass(frozen=True)
class RSIParams:
    """RSI parameters."""
    periods: tuple[int, ...] = (14, 21)
    overbought: float = 70.0
    oversold: float = 30.0


@dataclass(frozen=True)
class MACDParams:
    """MACD parameters."""
    fast_period: int = 12
    slow_period: int = 26
    signal_period: int = 9


@dataclass(frozen=True)
class BollingerParams:
    """Bollinger Bands parameters."""
    period: int = 20
    standard_deviations: float = 2.0


@dataclass(frozen=True)
class StochasticParams:
    """Stochastic oscillator parameters."""
    k_period: int = 14
    d_period: int = 3
    overbought: float = 80.0
    oversold: float = 20.0


@dataclass(frozen=True)
class VolumeParams:
    """Volume analysis parameters."""
    period: int = 20
    spike_threshold: float = 2.0               # Relative volume that counts as a spike


@dataclass(frozen=True)
class VWAPParams:
    """Session / true daily VWAP parameters."""
    enable_true_vwap: bool = True              # Fetch intraday bars for a true daily VWAP
    standard_deviations: float = 1.0


@dataclass(frozen=True)
class MVWAPParams:
    """Moving VWAP parameters."""
    period: int = 20
    standard_deviations: float = 1.0


@dataclass(frozen=True)
class IndicatorConfig:
    """Fully populated, validated indicator configuration for one analysis."""
    moving_averages: MovingAverageParams
    rsi: RSIParams
    macd: MACDParams
    bollinger_bands: BollingerParams
    stochastic: StochasticParams
    volume_analysis: VolumeParams
    vwap: VWAPParams
    mvwap: MVWAPParams


@dataclass(frozen=True)
class CacheParams:
    """Cache capacity and per-category TTLs (seconds)."""
    max_entries: int = 1000
    eviction_batch: int = 100
    default_ttl: float = 3600.0
    price_ttl: float = 900.0
    intraday_ttl: float = 3600.0
    indicator_ttl: float = 1800.0
    fundamentals_ttl: float = 86400.0


@dataclass(frozen=True)
class RetryParams:
    """Retry policy for provider fetches."""
    max_retries: int = 3
    retry_delay: float = 1.0                   # Seconds, multiplied by the attempt number


@dataclass(frozen=True)
class ErrorHistoryParams:
    """Error report history parameters."""
    max_reports: int = 100


@dataclass(frozen=True)
class CalculationParams:
    """Calculation tuning shared by all analyses."""
    rsi_warmup: int = 100                      # Tail window beyond the RSI period
    cross_confirmation: int = 3
    intraday_interval: str = "15m"
    intraday_expected_points: int = 26         # 15m bars in a regular session


@dataclass(frozen=True)
class EngineSettings:
    """Process-level engine settings."""
    cache: CacheParams
    retry: RetryParams
    errors: ErrorHistoryParams
    calculation: CalculationParams


def get_default_config() -> IndicatorConfig:
    """Get the default indicator configuration."""
    return IndicatorConfig(
        moving_averages=MovingAverageParams(),
        rsi=RSIParams(),
        macd=MACDParams(),
        bollinger_bands=BollingerParams(),
        stochastic=StochasticParams(),
        volume_analysis=VolumeParams(),
        vwap=VWAPParams(),
        mvwap=MVWAPParams(),
    )


def get_default_settings() -> EngineSettings:
    """Get the default engine settings."""
    return EngineSettings(
        cache=CacheParams(),
        retry=RetryParams(),
        errors=ErrorHistoryParams(),
        calculation=CalculationParams(),
    )
