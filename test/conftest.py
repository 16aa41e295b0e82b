"""
Test configuration for SIMPLE tests
"""

import pytest
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from environment import make_environment
from parsing import create_parser


@pytest.fixture
def env():
  """A fresh, empty environment"""
  return make_environment()


@pytest.fixture
def parser():
  return create_parser()
