"""Engine package boundary tests."""

import os
import subprocess
import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parents[1]


def test_engine_imports_without_web_stack():
    code = (
        "import sys\n"
        "import shopfinance.engine\n"
        "loaded = sorted(m for m in ('fastapi', 'starlette', 'httpx', 'pydantic_settings') if m in sys.modules)\n"
        "print(','.join(loaded))\n"
    )
    env = {**os.environ, "PYTHONPATH": str(BACKEND_DIR)}
    result = subprocess.run([sys.executable, "-c", code], env=env, capture_output=True, text=True, check=True)
    assert result.stdout.strip() == ""


def test_engine_errors_are_shared_with_the_app():
    from shopfinance.core import exceptions
    from shopfinance.engine import errors

    assert exceptions.InvalidRangeError is errors.InvalidRangeError
    assert exceptions.UndefinedBucketingError is errors.UndefinedBucketingError
    assert issubclass(exceptions.StoreUnavailableError, errors.FinanceEngineError)
