import asyncio
import json
from pathlib import Path

from hydra import compose, initialize_config_dir

from conftest import FakeBackend
from kisan_advisor import run
from kisan_advisor.advisor import FarmAdvisor
from kisan_advisor.schemas import Outcome

CONFIG_DIR = Path(run.__file__).resolve().parent / "configs"


def load_config(overrides=()):
    with initialize_config_dir(config_dir=str(CONFIG_DIR), version_base=None):
        return compose(config_name="config", overrides=list(overrides))


def test_config_ships_inside_the_package():
    assert (CONFIG_DIR / "config.yaml").is_file()


def test_config_composes_with_defaults():
    cfg = load_config()

    assert cfg.operation == "market"
    assert cfg.locale == "en"
    assert cfg.cache.ttls.alerts == 86400
    assert cfg.cache.cache_fallbacks is False


def test_run_operation_passes_params_and_locale(cache):
    cfg = load_config(["operation=farming_tips", "locale=hi", "+params.category=soil"])
    backend = FakeBackend([json.dumps([{"title": "Mulch", "description": "Keep soil moist"}])])
    advisor = FarmAdvisor(backend=backend, cache=cache, ttls={"analysis": 60})

    result = asyncio.run(run.run_operation(advisor, cfg))

    assert result.outcome == Outcome.OK
    assert result.cache_key == "farming_tips_soil_hi"
    assert "Generate farming tips for soil category." in backend.calls[0]["prompt"]
