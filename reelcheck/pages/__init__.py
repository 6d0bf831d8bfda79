from .movie_details import MovieDetails, MovieDetailsPage
from .upcoming_movies import UpcomingMoviesPage

__all__ = ["MovieDetails", "MovieDetailsPage", "UpcomingMoviesPage"]
