"""Tests for engine configuration loading and logging setup."""

import logging

import pytest
import torch

from core.algebra import Algebra
from core.config import CONFIG_ENV, EngineConfig, load_config, resolve_device
from core.metric import Metric
from log import ROOT_NAME, configure, get_logger


class TestEngineConfig:

    def test_defaults(self):
        cfg = load_config()
        assert isinstance(cfg, EngineConfig)
        assert cfg.dtype == "float64"
        assert cfg.torch_dtype == torch.float64
        assert cfg.device == "cpu"
        assert cfg.strict_narrowing is True

    def test_dotlist_overrides(self):
        cfg = load_config(overrides=["zero_tol=1.0e-10", "strict_narrowing=false"])
        assert cfg.zero_tol == pytest.approx(1e-10)
        assert cfg.strict_narrowing is False

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text("dtype: float32\ntaylor_threshold: 1.0e-5\n")
        cfg = load_config(str(path))
        assert cfg.torch_dtype == torch.float32
        assert cfg.taylor_threshold == pytest.approx(1e-5)
        assert cfg.narrowing_tol == pytest.approx(1e-9)

    def test_env_var_path(self, tmp_path, monkeypatch):
        path = tmp_path / "engine.yaml"
        path.write_text("narrowing_tol: 1.0e-6\n")
        monkeypatch.setenv(CONFIG_ENV, str(path))
        assert load_config().narrowing_tol == pytest.approx(1e-6)

    def test_shipped_defaults_match(self):
        import os
        path = os.path.join(os.path.dirname(__file__), os.pardir, "conf", "engine.yaml")
        assert load_config(path) == EngineConfig()

    def test_unsupported_dtype(self):
        with pytest.raises(ValueError):
            EngineConfig(dtype="float16")

    def test_auto_device(self):
        assert resolve_device("auto") in ("cuda", "mps", "cpu")
        assert resolve_device("cpu") == "cpu"

    def test_algebra_uses_config_dtype(self):
        alg = Algebra(Metric.euclidean(3), config=EngineConfig(dtype="float32"))
        v = alg.vector([1.0, 2.0, 3.0])
        assert v.dtype == torch.float32
        assert (v * v).dtype == torch.float32


class TestLogging:

    def test_logger_hierarchy(self):
        logger = get_logger("core.algebra")
        assert logger.name == f"{ROOT_NAME}.core.algebra"
        assert logging.getLogger(ROOT_NAME).handlers

    def test_warning_before_non_invertible(self, caplog):
        from core.errors import NonInvertible
        alg = Algebra(Metric.signature(2, 0, 1))
        with caplog.at_level(logging.WARNING, logger=ROOT_NAME):
            with pytest.raises(NonInvertible):
                alg.basis("e3").inverse()
        assert any("null element" in r.getMessage() for r in caplog.records)

    def test_file_sink_and_level(self, tmp_path):
        path = tmp_path / "engine.log"
        try:
            root = configure(level="debug", log_file=str(path))
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 2
            get_logger("cga.exponential").debug("taylor branch")
            for handler in root.handlers:
                handler.flush()
            line = path.read_text().strip()
            assert line.endswith(f"DEBUG {ROOT_NAME}.cga.exponential: taylor branch")
            assert "\033[" not in line
        finally:
            configure()

    def test_reconfigure_replaces_handlers(self, monkeypatch):
        monkeypatch.delenv("CLIFFKIN_LOG_FILE", raising=False)
        configure()
        root = configure()
        assert len(root.handlers) == 1
        assert root.handlers[0].formatter._fmt == "%(levelname)s %(name)s: %(message)s"
