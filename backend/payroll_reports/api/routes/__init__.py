"""One APIRouter per module; main.create_app() includes each explicitly."""
