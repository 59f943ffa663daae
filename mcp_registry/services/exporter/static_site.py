"""
Export the registry as a static file tree.

Every API response is written as `<path>/index.json` under the output
directory so the tree can be hosted without a server.
"""
from __future__ import annotations

import logging
import shutil
import sys
from pathlib import Path
from typing import Any, List, Optional, Sequence

from fastapi.templating import Jinja2Templates

from mcp_registry.api.payloads import (
    health_payload,
    info_payload,
    server_list_payload,
    server_payload,
    server_versions_payload,
)
from mcp_registry.core.dependencies import get_registry_config, get_repository
from mcp_registry.data.legacy import to_legacy_record
from mcp_registry.domain.entities import LATEST, Registry
from mcp_registry.domain.models import API_VERSION, ServerSearchRequest
from mcp_registry.domain.registry_utils import dash_encode, render_json

logger = logging.getLogger(__name__)

_PACKAGE_ROOT = Path(__file__).resolve().parents[2]
STATIC_DIR = _PACKAGE_ROOT / "static"
TEMPLATES_DIR = _PACKAGE_ROOT / "templates"

DEFAULT_OUTPUT_DIR = Path("_site")

# Files copied verbatim from STATIC_DIR into the site root.
PASSTHROUGH_FILES = (".nojekyll",)


def write_json_file(site_dir: Path, relative_path: str, payload: Any) -> Path:
    full_path = site_dir / relative_path
    full_path.parent.mkdir(parents=True, exist_ok=True)
    full_path.write_bytes(render_json(payload))
    logger.info("Generated: %s", relative_path)
    return full_path


def server_dir(name: str) -> str:
    """Directory for a server's documents, keyed by its dash-encoded name."""
    return f"{API_VERSION}/servers/{dash_encode(name)}/versions"


def export_static_site(
    registry: Registry,
    output_dir: Path,
    static_dir: Path = STATIC_DIR,
    templates_dir: Path = TEMPLATES_DIR,
) -> List[Path]:
    """
    Write the full static site for `registry` into `output_dir`.

    Any filesystem error propagates; there is no partial-success reporting.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []

    written.append(write_json_file(output_dir, "index.json", info_payload(registry.config)))
    written.append(write_json_file(output_dir, "health/index.json", health_payload()))

    result = registry.search_servers(ServerSearchRequest())
    written.append(
        write_json_file(output_dir, f"{API_VERSION}/servers/index.json", server_list_payload(result))
    )

    seen_names = set()
    for entry in registry.servers:
        base = server_dir(entry.name)

        if entry.name not in seen_names:
            seen_names.add(entry.name)
            versions = [s for s in registry.servers if s.name == entry.name]
            written.append(
                write_json_file(output_dir, f"{base}/index.json", server_versions_payload(versions))
            )
            # Same pick as the live endpoint: first flagged version in load order.
            if any(s.is_latest for s in versions):
                written.append(
                    write_json_file(
                        output_dir,
                        f"{base}/{LATEST}/index.json",
                        server_payload(registry.get_latest(entry.name)),
                    )
                )

        written.append(
            write_json_file(output_dir, f"{base}/{entry.version}/index.json", server_payload(entry))
        )

    written.append(_render_index_html(registry, output_dir, templates_dir))

    for filename in PASSTHROUGH_FILES:
        destination = output_dir / filename
        shutil.copyfile(static_dir / filename, destination)
        logger.info("Copied: %s", filename)
        written.append(destination)

    # Backward-compatible flat registry.json for legacy consumers
    written.append(
        write_json_file(
            output_dir,
            "registry.json",
            {"servers": [to_legacy_record(s) for s in registry.servers]},
        )
    )

    logger.info("Static site generation complete: %d files in %s", len(written), output_dir)
    return written


def _render_index_html(registry: Registry, output_dir: Path, templates_dir: Path) -> Path:
    templates = Jinja2Templates(directory=str(templates_dir))
    html = templates.get_template("index.html").render(
        info=info_payload(registry.config),
        servers=[s for s in registry.servers if s.is_latest] or list(registry.servers),
        server_dir=server_dir,
    )
    destination = output_dir / "index.html"
    destination.write_text(html, encoding="utf-8")
    logger.info("Rendered: index.html")
    return destination


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Console entry point: `mcp-registry-build-static [OUTPUT_DIR]`.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    output_dir = Path(args[0]) if args else DEFAULT_OUTPUT_DIR

    logging.basicConfig(
        level=get_registry_config().log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        export_static_site(get_repository(), output_dir)
    except Exception as e:
        logger.error("Static export failed: %s", e, exc_info=True)
        return 1

    logger.info("Files generated in: %s", output_dir.resolve())
    return 0


if __name__ == "__main__":
    sys.exit(main())
