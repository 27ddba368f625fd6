import platform
import time
from typing import Any, Dict

from fastapi import Depends

from companion.api.deps import get_settings_bridge
from companion.bridge import SettingsBridge
from companion.metrics import BUILD_VERSION


async def health(
    bridge: SettingsBridge = Depends(get_settings_bridge),
) -> Dict[str, Any]:
    return {
        "status": "ok",
        "version": BUILD_VERSION,
        "ts": time.time(),
        "optionsStored": bridge.stored_options() is not None,
        "configBaseUrl": bridge.config_base_url,
        "runtime": {
            "python": platform.python_version(),
        },
    }
