from __future__ import annotations

import base64
import hashlib
import logging
import zlib
from pathlib import Path

from ..constants import ENGINE_VERSION, QUERY_ENGINE
from ..data_layer.paths import Paths
from ..generator.rendering import render_template
from ..platforms import ResolvedPlatform
from ..utils.errors import WriteError

logger = logging.getLogger(__name__)

DATA_LINE_WIDTH = 76
EMBED_TEMPLATE = "engine"


def encode_engine(data: bytes, *, width: int = DATA_LINE_WIDTH) -> list[str]:
    encoded = base64.b64encode(zlib.compress(data, 9)).decode("ascii")
    return [encoded[i:i + width] for i in range(0, len(encoded), width)]


def embed(
    platform: ResolvedPlatform,
    binary_path: Path | str,
    package: str,
    output_dir: Path | str,
    *,
    engine_name: str = QUERY_ENGINE,
    version: str = ENGINE_VERSION,
) -> Path:
    """Write ``<engine>-<platform>_gen.py`` embedding the cached binary."""
    paths = Paths.from_str(output_dir)
    target = paths.engine_file(engine_name, platform.name)
    source = Path(binary_path)
    try:
        data = source.read_bytes()
    except OSError as exc:
        raise WriteError(
            ctx={"platform": platform.name, "path": str(source), "reason": "engine_unreadable"},
            cause=exc,
        ) from exc

    chunks = encode_engine(data)
    content = render_template(
        EMBED_TEMPLATE,
        {
            "package": package,
            "engine_name": engine_name,
            "engine_version": version,
            "platform": platform,
            "sha256": hashlib.sha256(data).hexdigest(),
            "size": len(data),
            "data_block": "\n".join(f'    "{chunk}"' for chunk in chunks),
        },
    )

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise WriteError(ctx={"platform": platform.name, "path": str(target)}, cause=exc) from exc
    logger.debug(f"write engine file at {target.name}")
    return target


__all__ = ["DATA_LINE_WIDTH", "embed", "encode_engine"]
