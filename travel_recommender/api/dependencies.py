from travel_recommender.api.recommender_service import RecommenderBundle
from travel_recommender.core.config import ApiSettings
from fastapi import FastAPI
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from functools import lru_cache


@lru_cache(maxsize=1)
def get_recommender_bundle() -> RecommenderBundle:
    settings = ApiSettings.from_env()
    return RecommenderBundle(settings)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    try:
        yield
    finally:
        if get_recommender_bundle.cache_info().currsize:
            bundle = get_recommender_bundle()
            await bundle.close()
