import logging

from filmcatalog.common.logging import get_logger


def test_loggers_live_under_package_namespace():
    assert get_logger("db.session").name == "filmcatalog.db.session"
    assert get_logger("filmcatalog.services").name == "filmcatalog.services"
    assert get_logger().name == "filmcatalog"


def test_explicit_level_applies_to_package_root():
    get_logger("x", level=logging.WARNING)
    assert logging.getLogger("filmcatalog").level == logging.WARNING
    get_logger("x", level="DEBUG")
    assert logging.getLogger("filmcatalog").level == logging.DEBUG
