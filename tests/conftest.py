import warnings

# Ignore deprecation noise from third-party response classes
warnings.filterwarnings("ignore", category=DeprecationWarning)

from tests.fixtures.broadcast_fixtures import *  # noqa: E402, F403
from tests.fixtures.app_fixtures import *  # noqa: E402, F403
from tests.fixtures.clock_fixtures import *  # noqa: E402, F403
