import pytest
import sys
from pathlib import Path
from unittest.mock import Mock

# Add the project root to the Python path
root_path = str(Path(__file__).parent.parent.parent)
if root_path not in sys.path:
    sys.path.append(root_path)

from tests.utils.test_logger import create_test_logger


@pytest.fixture
def mock_logger():
    """Create a mock logger."""
    logger = Mock()
    logger.log_info = Mock()
    logger.log_error = Mock()
    logger.log_warning = Mock()
    logger.log_debug = Mock()
    logger.log_delivery = Mock()
    logger.log_config_source = Mock()
    return logger


@pytest.fixture
def test_logger():
    """Create a logger that records messages as strings."""
    return create_test_logger()
