# src/config/settings.py

"""Central configuration for the ConsulteJá barcode lookup."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the ConsulteJá barcode lookup."""

    # --- HTTP ---
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "pt-BR,pt;q=0.9,en-US;q=0.8,en;q=0.7",
    }
    COSMOS_USER_AGENT: str = "ConsulteJa-App/1.0"

    # --- API keys ---
    BARCODELOOKUP_API_KEY: str = os.getenv(
        "BARCODELOOKUP_API_KEY", "demo"
    )
    COSMOS_TOKEN: str = os.getenv("COSMOS_TOKEN", "")

    # --- History ---
    HISTORY_LIMIT: int = 5              # Most recent lookups kept

    # --- Camera ---
    CAMERA_INDEX: int = 0
    CAMERA_WIDTH: int = 640
    CAMERA_HEIGHT: int = 480
    SCAN_TIMEOUT: float = 30.0          # Seconds before a scan gives up

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = Path(
        os.getenv("CONSULTEJA_DATA_DIR", str(BASE_DIR / "data"))
    )
    STORAGE_PATH: Path = DATA_DIR / "local_storage.json"
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Providers (tried in this order) ---
    AVAILABLE_PROVIDERS: list[dict[str, str]] = [
        {
            "id": "barcode_lookup",
            "label": "Barcode Lookup",
            "provider": (
                "src.providers.barcode_lookup_provider"
                ".BarcodeLookupProvider"
            ),
        },
        {
            "id": "upcitemdb",
            "label": "UPC Item DB",
            "provider": "src.providers.upcitemdb_provider.UpcItemDbProvider",
        },
        {
            "id": "open_food_facts",
            "label": "Open Food Facts",
            "provider": (
                "src.providers.open_food_facts_provider"
                ".OpenFoodFactsProvider"
            ),
        },
        {
            "id": "cosmos",
            "label": "Cosmos",
            "provider": "src.providers.cosmos_provider.CosmosProvider",
        },
    ]
