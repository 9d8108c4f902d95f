import logging

from foodstand.logs import configure_logging


def test_configure_logging_writes_to_file(tmp_path):
    path = tmp_path / "logs" / "debug.log"
    root = configure_logging(path)
    try:
        logging.getLogger("foodstand.ledger").info("create_order day=%s", "2024-05-17")
        for handler in root.handlers:
            handler.flush()
        assert "create_order day=2024-05-17" in path.read_text(encoding="utf-8")
        # A second call does not stack handlers.
        configure_logging(path)
        assert len(root.handlers) == 1
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        root.propagate = True
