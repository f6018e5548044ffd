from mangum import Mangum
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from shift.api import create_app
from shift.config import Settings, configure_logging

settings = Settings.from_env()
configure_logging(settings.log_level)

app = create_app(settings)

handler = Mangum(app)
