"""
Build metadata written next to a deployed build.
"""
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from staffhub.config import Settings

logger = logging.getLogger(__name__)


def build_info(settings: Settings, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Public build metadata. Never includes keys or secrets."""
    now = now or datetime.now(timezone.utc)
    return {
        "buildTime": now.isoformat(),
        "version": settings.APP_VERSION,
        "mode": "development" if settings.DEV_MODE else "production",
        "supabaseUrl": settings.SUPABASE_URL,
        "googleRedirectUri": settings.GOOGLE_REDIRECT_URI,
    }


def write_build_info(settings: Settings, path: Union[str, Path]) -> Dict[str, Any]:
    """Write build-info.json to `path`, creating parent directories."""
    info = build_info(settings)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(info, indent=2))
    logger.info(f"Build info written to {path}")
    return info
