# api/router.py
from fastapi import APIRouter, FastAPI

from . import admin, auth, collections, favorites, meal_plan, public_recipes, recipes, users

# (router, /api prefix, short alias, tag)
_MOUNTS = [
    (auth.router,           "/api/auth",           "",                "Auth"),
    (users.router,          "/api/users",          "/users",          "Users"),
    (recipes.router,        "/api/recipes",        "/resource",       "Recipes"),
    (favorites.router,      "/api/favorites",      "/favorites",      "Favorites"),
    (collections.router,    "/api/collections",    "/collections",    "Collections"),
    (meal_plan.router,      "/api/meal-plan",      "/meal-plan",      "Meal plan"),
    (admin.router,          "/api/admin",          "/admin",          "Admin"),
    (public_recipes.router, "/api/public/recipes", "/public/recipes", "Public recipes"),
]

api_router = APIRouter()

for router, prefix, _, tag in _MOUNTS:
    api_router.include_router(router, prefix=prefix, tags=[tag])


@api_router.get("/api/health", tags=["meta"])
def health() -> dict[str, str]:
    return {"status": "ok", "message": "Recipe Book API is running"}


# short paths used by the bundled frontend (POST /login, /resource/{id}, ...)
alias_router = APIRouter(include_in_schema=False)

for router, _, alias, _tag in _MOUNTS:
    alias_router.include_router(router, prefix=alias, include_in_schema=False)


def include_routes(app: FastAPI) -> None:
    app.include_router(api_router)
    app.include_router(alias_router)
