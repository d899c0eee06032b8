import logging

from fillmap.config.logging_config import setup_logging
from fillmap.config.parameters import Parameters, get_default_parameters


def test_missing_file_gives_defaults(tmp_path) -> None:
    params = get_default_parameters(tmp_path / "absent.yaml")
    assert params == Parameters()
    assert params.map_style.legend_loc == "bottomright"
    assert params.assessment.iid_prior == (2.0, 1.0)


def test_yaml_overrides(tmp_path) -> None:
    path = tmp_path / "fillmap.yaml"
    path.write_text(
        "map_style:\n"
        "  legend_loc: [0.1, 0.9]\n"
        "  title_scale: 2\n"
        "continuous:\n"
        "  legend_round: 2\n"
        "assessment:\n"
        "  strategy: tertile\n"
        "  besag_prior: [1, 0.01]\n"
    )
    params = get_default_parameters(path)

    assert params.map_style.legend_loc == (0.1, 0.9)
    assert params.map_style.title_scale == 2
    assert params.map_style.legend_scale == 1.5
    assert params.continuous.legend_round == 2
    assert params.assessment.strategy == "tertile"
    assert params.assessment.besag_prior == (1.0, 0.01)


def test_broken_yaml_falls_back(tmp_path, caplog) -> None:
    path = tmp_path / "fillmap.yaml"
    path.write_text("map_style: [unclosed\n")
    params = get_default_parameters(path)
    assert params == Parameters()
    assert "Failed to load config" in caplog.text


def test_setup_logging_writes_file(tmp_path) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging(logging.DEBUG, log_dir=tmp_path)
        logging.getLogger("fillmap.test").info("hello")
        for handler in root.handlers:
            handler.flush()
        assert "hello" in (tmp_path / "fillmap.log").read_text()
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
