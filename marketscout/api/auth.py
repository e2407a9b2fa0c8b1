from typing import Dict

from fastapi import Depends, HTTPException, Request
from fastapi.security import APIKeyHeader
from marketscout.core.config import parse_comma_list, settings
from marketscout.core.logger import Logger

logger = Logger("APIAuth")

API_KEY_HEADER = "X-API-Key"
ANONYMOUS = "anonymous"

api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


def parse_api_keys(raw: str = None) -> Dict[str, str]:
    """Parse 'key:user,key2:user2' into {key: user}.

    Entries without a user name are skipped; settings.API_KEYS is used
    when no string is given.
    """
    keys = {}
    for pair in parse_comma_list(settings.API_KEYS if raw is None else raw):
        key, sep, user_id = pair.partition(":")
        if sep and key.strip() and user_id.strip():
            keys[key.strip()] = user_id.strip()
    return keys


async def verify_api_key(request: Request, api_key: str = Depends(api_key_header)) -> str:
    """Resolve the caller of a scan endpoint; open when no keys are configured."""
    api_keys = parse_api_keys()

    if not api_keys:
        user_id = ANONYMOUS
    elif not api_key:
        raise HTTPException(status_code=401, detail=f"{API_KEY_HEADER} header required")
    elif api_key not in api_keys:
        logger.warn(f"Rejected key {api_key[:4]}... on {request.method} {request.url.path}")
        raise HTTPException(status_code=403, detail="Invalid API key")
    else:
        user_id = api_keys[api_key]

    return user_id
