"""Entry point that wires Hydra configuration and runs one advisor operation."""

import asyncio
import json
import logging
import sys

import hydra
from omegaconf import DictConfig, OmegaConf

from kisan_advisor.advisor import FarmAdvisor
from kisan_advisor.cache import ResponseCache
from kisan_advisor.config import ConfigurationError, app_config
from kisan_advisor.llm_utils import MediaAttachment

logger = logging.getLogger(__name__)


def read_media(path: str, mime_type: str) -> MediaAttachment:
    with open(path, "rb") as handle:
        return MediaAttachment(data=handle.read(), mime_type=mime_type)


async def run_operation(advisor: FarmAdvisor, cfg: DictConfig):
    params = OmegaConf.to_container(cfg.params, resolve=True) if cfg.get("params") else {}
    media = None
    if cfg.get("image"):
        media = read_media(cfg.image, cfg.get("image_mime_type", "image/jpeg"))
    return await advisor.fetch(cfg.operation, cfg.locale, media=media, **params)


@hydra.main(config_path="configs", config_name="config", version_base=None)
def main(cfg: DictConfig) -> None:
    """Hydra-driven execution entry point."""
    logging.basicConfig(
        level=getattr(logging, str(cfg.get("log_level", "INFO")).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.debug("Configuration:\n%s", OmegaConf.to_yaml(cfg))

    app_config.configure(cfg)
    try:
        app_config.get_client()
    except ConfigurationError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    # One cache for the lifetime of the process.
    cache = ResponseCache()
    advisor = FarmAdvisor.from_config(cache)

    result = asyncio.run(run_operation(advisor, cfg))
    if result.degraded:
        logger.warning("Served fallback data for %s: %s", result.operation, result.error)
    print(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
