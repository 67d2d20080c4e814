"""
Entry point for the treeftp web viewer.

Checks that Streamlit is available and replaces the current process with
`streamlit run` on the viewer page.
"""

import argparse
import importlib.util
import logging
import os
import subprocess
import sys
from typing import List, Optional

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("treeftp.ui")

APP_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "app.py")
FAST_START = os.getenv('TREEFTP_UI_FAST_START', '0').lower() in ('1', 'true', 'yes')


def _module_available(name: str) -> bool:
    return importlib.util.find_spec(name) is not None


def verify_dependencies() -> bool:
    """
    Verify that Streamlit can be imported before trying to exec it.
    """
    if FAST_START:
        logger.info("FAST_START enabled, skipping dependency verification")
        return True

    if not _module_available("streamlit"):
        logger.error("✗ Missing required module: streamlit")
        logger.error("  Install it with: pip install streamlit")
        return False

    logger.info("✓ streamlit available")
    return True


def build_command(host: str = '127.0.0.1', port: int = 8501) -> List[str]:
    return [
        'streamlit',
        'run',
        APP_PATH,
        f'--server.port={port}',
        f'--server.address={host}',
        '--logger.level=info',
        '--client.showErrorDetails=true'
    ]


def start_streamlit(host: str = '127.0.0.1', port: int = 8501):
    """
    Start the Streamlit viewer.

    Args:
        host: Host to bind Streamlit to
        port: Port to expose Streamlit on
    """
    logger.info("Starting treeftp viewer on %s:%s...", host, port)
    cmd = build_command(host, port)

    # Replace the current process so signals reach Streamlit directly
    try:
        os.execvp(cmd[0], cmd)
    except OSError as e:
        logger.error("Failed to exec Streamlit: %s", e)
        try:
            subprocess.run(cmd, check=True)
        except subprocess.CalledProcessError as e2:
            logger.error("Streamlit exited with error code %s", e2.returncode)
            sys.exit(e2.returncode)
        except OSError as e2:
            logger.error("Failed to start Streamlit: %s", e2)
            sys.exit(1)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="treeftp-ui", description="Browse an FTP tree in the browser.")
    parser.add_argument("--host", default=os.getenv("TREEFTP_UI_HOST", "127.0.0.1"), help="Address to bind")
    parser.add_argument("--port", type=int, default=int(os.getenv("TREEFTP_UI_PORT", "8501")), help="Port to bind")
    args = parser.parse_args(argv)

    if not verify_dependencies():
        logger.error("Dependency verification failed")
        return 1

    start_streamlit(args.host, args.port)
    return 0


if __name__ == '__main__':
    sys.exit(main())
