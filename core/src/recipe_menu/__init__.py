from recipe_menu.config import AppConfig, load_app_config
from recipe_menu.home import RecipeMenuHome, prepare_home, resolve_home
from recipe_menu.recipes import RecipeCollection, load_recipes

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "RecipeCollection",
    "RecipeMenuHome",
    "__version__",
    "load_app_config",
    "load_recipes",
    "prepare_home",
    "resolve_home",
]
