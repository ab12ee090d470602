# moviedeck/api/routers/movies.py
from typing import List

from fastapi import APIRouter, Depends, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from moviedeck.api.dependencies import get_gateway
from moviedeck.api.schemas import GenreOut, MovieSummaryOut
from moviedeck.services.tmdb import MovieGateway

router = APIRouter(tags=["Movies"])


def _out(movies) -> List[MovieSummaryOut]:
    return [MovieSummaryOut.from_movie(m) for m in movies]


@router.get("/trending", response_model=List[MovieSummaryOut], name="movies.trending")
async def trending(
    window: str = Query("week", pattern="^(day|week)$"),
    page: int = Query(1, ge=1),
    gateway: MovieGateway = Depends(get_gateway),
):
    return _out(await gateway.fetch_trending_movies(window, page))


@router.get("/popular", response_model=List[MovieSummaryOut], name="movies.popular")
async def popular(page: int = Query(1, ge=1), gateway: MovieGateway = Depends(get_gateway)):
    return _out(await gateway.fetch_popular_movies(page))


@router.get("/now-playing", response_model=List[MovieSummaryOut], name="movies.now_playing")
async def now_playing(page: int = Query(1, ge=1), gateway: MovieGateway = Depends(get_gateway)):
    return _out(await gateway.fetch_now_playing_movies(page))


@router.get("/top-rated", response_model=List[MovieSummaryOut], name="movies.top_rated")
async def top_rated(page: int = Query(1, ge=1), gateway: MovieGateway = Depends(get_gateway)):
    return _out(await gateway.fetch_top_rated_movies(page))


@router.get("/genres", response_model=List[GenreOut], name="movies.genres")
async def genres(gateway: MovieGateway = Depends(get_gateway)):
    return [GenreOut(id=g.id, name=g.name) for g in await gateway.fetch_genres()]


@router.get("/search", response_model=List[MovieSummaryOut], name="movies.search")
async def search(
    q: str = Query(..., min_length=1),
    page: int = Query(1, ge=1),
    gateway: MovieGateway = Depends(get_gateway),
):
    return _out(await gateway.search_movies(q, page))


@router.get("/genre/{genre_id}", response_model=List[MovieSummaryOut], name="movies.by_genre")
async def by_genre(
    genre_id: int,
    page: int = Query(1, ge=1),
    gateway: MovieGateway = Depends(get_gateway),
):
    return _out(await gateway.fetch_movies_by_genre(genre_id, page))


@router.get("/{movie_id}", response_model=dict, name="movies.detail")
async def detail(movie_id: int, gateway: MovieGateway = Depends(get_gateway)):
    info = await gateway.fetch_movie_details(movie_id)
    # full TMDb body, including credits/videos/reviews
    return JSONResponse(content=jsonable_encoder(info.raw))
