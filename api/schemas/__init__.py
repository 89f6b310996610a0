"""Re-export individual schema modules for easy imports."""

from .admin import AdminStats, MessageOut
from .collection import CollectionIn, CollectionOut, CollectionUpdate
from .meal_plan import (
    DaySummary,
    MealPlanEntryIn,
    MealPlanEntryOut,
    MealPlanEntryUpdate,
    MealPlanOut,
    MealPlanSummary,
)
from .recipe import (
    Page,
    PublicRecipeOut,
    RecipeCreate,
    RecipeOut,
    RecipeSummary,
    RecipeUpdate,
    SortOrder,
)
from .user import AuthOut, LoginIn, ProfileUpdate, RegisterIn, RoleUpdate, UserOut

__all__ = [
    "AdminStats",
    "MessageOut",
    "CollectionIn",
    "CollectionOut",
    "CollectionUpdate",
    "DaySummary",
    "MealPlanEntryIn",
    "MealPlanEntryOut",
    "MealPlanEntryUpdate",
    "MealPlanOut",
    "MealPlanSummary",
    "Page",
    "PublicRecipeOut",
    "RecipeCreate",
    "RecipeOut",
    "RecipeSummary",
    "RecipeUpdate",
    "SortOrder",
    "AuthOut",
    "LoginIn",
    "ProfileUpdate",
    "RegisterIn",
    "RoleUpdate",
    "UserOut",
]
