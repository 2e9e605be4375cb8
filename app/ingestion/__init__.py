from app.ingestion.base import BaseSource
from app.ingestion.countries import CountriesSource
from app.ingestion.points_of_interest import PointsOfInterestSource
from app.ingestion.quality_scores import QualityScoreSource
from app.ingestion.runner import AggregationResult, DestinationAggregator, SourceOutcome, build_aggregator
from app.ingestion.weather import WeatherSource

__all__ = [
    "BaseSource",
    "CountriesSource",
    "PointsOfInterestSource",
    "QualityScoreSource",
    "WeatherSource",
    "AggregationResult",
    "DestinationAggregator",
    "SourceOutcome",
    "build_aggregator",
]
