"""Services for TMDB access, search, enrichment and persistence."""

from .cache_service import CacheService, get_cache_service
from .tmdb_client import TMDbClient, get_tmdb_client
from .genre_service import GenreResolver, get_genre_resolver, normalize_genre_name
from .trailer_service import TrailerEnricher, get_trailer_enricher
from .search_service import SearchAggregator, get_search_aggregator
from .catalog_service import CatalogService, get_catalog_service
from .firestore_service import FirestoreService, get_firestore_service
from .recommendation_service import RecommendationService, get_recommendation_service

__all__ = [
    "CacheService",
    "get_cache_service",
    "TMDbClient",
    "get_tmdb_client",
    "GenreResolver",
    "get_genre_resolver",
    "normalize_genre_name",
    "TrailerEnricher",
    "get_trailer_enricher",
    "SearchAggregator",
    "get_search_aggregator",
    "CatalogService",
    "get_catalog_service",
    "FirestoreService",
    "get_firestore_service",
    "RecommendationService",
    "get_recommendation_service",
]
