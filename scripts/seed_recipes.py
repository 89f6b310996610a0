"""
Seed a few demo recipes for an existing user.

Usage
-----

    # default hard-coded trio
    python -m scripts.seed_recipes <EMAIL>

    # custom list (same schema as POST /api/recipes) in a JSON file
    python -m scripts.seed_recipes <EMAIL> --file path/to/recipes.json --public
"""
from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, List

from dotenv import load_dotenv
load_dotenv()

from api.schemas import RecipeCreate
from services.db import Recipe, get_user_by_email, session_scope

# ────────────────────────────────────────────────────────────────────
_DEFAULT_RECIPES: List[dict[str, Any]] = [
    {
        "title": "Masala Oats with Veggies",
        "category": "breakfast",
        "cuisine": "indian",
        "ingredients": ["1 cup rolled oats", "1 onion", "1 tomato", "1 tsp garam masala"],
        "steps": ["Sauté onion and tomato.", "Add oats, spices and 2 cups water.", "Simmer 5 minutes."],
        "prep_time": 5,
        "cook_time": 10,
        "servings": 2,
        "calories": 380,
        "tags": ["vegetarian", "quick"],
    },
    {
        "title": "Grilled Tandoori Chicken",
        "category": "main",
        "cuisine": "indian",
        "difficulty": "medium",
        "ingredients": ["500 g chicken thighs", "1 cup yogurt", "2 tbsp tandoori masala"],
        "steps": ["Marinate chicken overnight.", "Grill 8 minutes per side."],
        "prep_time": 15,
        "cook_time": 20,
        "servings": 4,
        "calories": 510,
        "tags": ["high-protein"],
    },
    {
        "title": "Palak Paneer",
        "category": "main",
        "cuisine": "indian",
        "ingredients": ["300 g spinach", "200 g paneer", "1 onion", "2 cloves garlic"],
        "steps": ["Blanch and purée spinach.", "Fry aromatics, add purée and paneer."],
        "prep_time": 10,
        "cook_time": 20,
        "servings": 3,
        "calories": 560,
        "tags": ["vegetarian"],
    },
]


async def _seed(email: str, recipes: list[dict[str, Any]], public: bool) -> int:
    async with session_scope() as db:
        user = await get_user_by_email(db, email)
        if user is None:
            print(f"✗ no user with email {email}")
            return 1

        for raw in recipes:
            body = RecipeCreate.model_validate({**raw, "is_public": public or raw.get("is_public", False)})
            db.add(Recipe(owner_id=user.id, **body.model_dump()))
        await db.commit()
    print(f"✓ inserted {len(recipes)} recipes for {email}")
    return 0


def _load_json(path: Path) -> list[dict[str, Any]]:
    data = json.loads(path.read_text())
    if not isinstance(data, list):
        raise ValueError("JSON file must contain a list of recipe dictionaries")
    return data


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("email", help="owner's email address")
    parser.add_argument(
        "--file",
        type=Path,
        help="optional JSON file with recipes to seed (overrides defaults)",
    )
    parser.add_argument("--public", action="store_true", help="publish every seeded recipe")
    args = parser.parse_args()

    recipes = _load_json(args.file) if args.file else _DEFAULT_RECIPES
    sys.exit(asyncio.run(_seed(args.email, recipes, args.public)))


if __name__ == "__main__":
    main()
