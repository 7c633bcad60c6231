import json
import logging
import pathlib

import pytest

from shared.logger import ROOT_LOGGER_NAME, DepsLogger, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger(ROOT_LOGGER_NAME)
    handlers, level, propagate = list(root.handlers), root.level, root.propagate
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    root.propagate = propagate


class TestDepsLogger:
    def test_component_logger_name(self) -> None:
        assert DepsLogger('segments').underlying.name == 'elfdeps.segments'
        assert DepsLogger().underlying.name == ROOT_LOGGER_NAME

    @pytest.mark.usefixtures('restore_root_logger')
    def test_json_file(self, tmp_path : pathlib.Path) -> None:
        log_file = tmp_path / 'logs' / 'elfdeps.log'
        setup_logging(log_level = 'DEBUG', log_file = log_file, json_logs = True, console_output = False)

        log = DepsLogger('dynamic')
        with log.operation('decode'):
            log.debug('Decoded %d entries', 7, segment = 'PT_DYNAMIC')

        for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
            handler.flush()
        record = json.loads(log_file.read_text(encoding = 'utf-8').splitlines()[-1])
        assert record['level'] == 'DEBUG'
        assert record['logger'] == 'elfdeps.dynamic'
        assert record['message'] == 'Decoded 7 entries'
        assert record['component'] == 'dynamic'
        assert record['operation'] == 'decode'
        assert record['extra'] == {'segment': 'PT_DYNAMIC'}

    @pytest.mark.usefixtures('restore_root_logger')
    def test_level_filters(self, tmp_path : pathlib.Path) -> None:
        log_file = tmp_path / 'elfdeps.log'
        setup_logging(log_level = 'WARNING', log_file = log_file, console_output = False)

        log = DepsLogger('engine')
        log.debug('hidden')
        log.warning('shown')

        for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
            handler.flush()
        text = log_file.read_text(encoding = 'utf-8')
        assert 'hidden' not in text
        assert 'shown' in text

    def test_operation_restored(self) -> None:
        log = DepsLogger('engine')
        with log.operation('outer'):
            with log.operation('inner'):
                pass
            assert log._operation == 'outer'
        assert log._operation is None

    def test_timed(self) -> None:
        with DepsLogger('engine').timed('noop') as timer:
            pass
        assert timer.elapsed >= 0.0
