"""Allergen lexicon entries (v1).

Keys are matched as lowercase substrings of an ingredient.
Keep entries.json in sync (scripts/validate_lexicon_data.py).
"""

ENTRIES = [
    {"key": "dough", "tags": ["gluten"]},
    {"key": "wheat", "tags": ["gluten"]},
    {"key": "flour", "tags": ["gluten"]},
    {"key": "bread", "tags": ["gluten"]},
    {"key": "croutons", "tags": ["gluten"]},
    {"key": "pasta", "tags": ["gluten"]},
    {"key": "barley", "tags": ["gluten"]},
    {"key": "rye", "tags": ["gluten"]},
    {"key": "oats", "tags": ["gluten"]},
    {"key": "cheese", "tags": ["milk"]},
    {"key": "mozzarella", "tags": ["milk"]},
    {"key": "cheddar", "tags": ["milk"]},
    {"key": "parmesan", "tags": ["milk"]},
    {"key": "milk", "tags": ["milk"]},
    {"key": "butter", "tags": ["milk"]},
    {"key": "cream", "tags": ["milk"]},
    {"key": "yogurt", "tags": ["milk"]},
    {"key": "whey", "tags": ["milk"]},
    {"key": "egg", "tags": ["egg"]},
    {"key": "eggs", "tags": ["egg"]},
    {"key": "mayonnaise", "tags": ["egg"]},
    {"key": "fish", "tags": ["fish"]},
    {"key": "salmon", "tags": ["fish"]},
    {"key": "tuna", "tags": ["fish"]},
    {"key": "anchovies", "tags": ["fish"]},
    {"key": "cod", "tags": ["fish"]},
    {"key": "sardines", "tags": ["fish"]},
    {"key": "shrimp", "tags": ["shellfish"]},
    {"key": "crab", "tags": ["shellfish"]},
    {"key": "lobster", "tags": ["shellfish"]},
    {"key": "prawns", "tags": ["shellfish"]},
    {"key": "oyster", "tags": ["shellfish"]},
    {"key": "peanut", "tags": ["peanuts"]},
    {"key": "peanuts", "tags": ["peanuts"]},
    {"key": "almond", "tags": ["tree nuts"]},
    {"key": "walnut", "tags": ["tree nuts"]},
    {"key": "cashew", "tags": ["tree nuts"]},
    {"key": "pistachio", "tags": ["tree nuts"]},
    {"key": "pecan", "tags": ["tree nuts"]},
    {"key": "soy", "tags": ["soy"]},
    {"key": "tofu", "tags": ["soy"]},
    {"key": "soy sauce", "tags": ["soy"]},
    {"key": "edamame", "tags": ["soy"]},
    {"key": "sesame", "tags": ["sesame"]},
    {"key": "tahini", "tags": ["sesame"]},
]
