"""
Command-line launcher for the editor.

    inkstamp document.pdf [assets.json] [output.pdf]

The saved document is written to ``output.pdf``, or next to the input
as ``<name>_validated.pdf``.
"""
import sys
from pathlib import Path

from PyQt5.QtWidgets import QApplication, QMessageBox

from inkstamp.core.assets import AssetCatalog
from inkstamp.ui import EditorWindow
from inkstamp.utils.config_service import load_settings
from inkstamp.utils.logging_service import get_logger, setup_logging

logger = get_logger(__name__)

USAGE = "usage: inkstamp document.pdf [assets.json] [output.pdf]"


def default_output_path(source: Path) -> Path:
    return source.with_name(f"{source.stem}_validated{source.suffix or '.pdf'}")


def main():
    """
    Open the editor on a PDF file given on the command line.
    """
    setup_logging()

    args = sys.argv[1:]
    if not args:
        print(USAGE, file=sys.stderr)
        sys.exit(2)

    source = Path(args[0])
    output = Path(args[2]) if len(args) > 2 else default_output_path(source)

    app = QApplication(sys.argv)
    settings = load_settings()

    catalog = AssetCatalog()
    if len(args) > 1:
        try:
            catalog = AssetCatalog.load(args[1])
        except (OSError, ValueError) as e:
            logger.error(f"Could not load asset catalog {args[1]}: {e}")
            QMessageBox.warning(None, "Assets", f"Could not load stamps and signatures:\n{e}")

    def write_output(data: bytes) -> None:
        output.write_bytes(data)
        logger.info(f"Saved validated document to {output}")

    window = EditorWindow(write_output, settings=settings, catalog=catalog)

    try:
        data = source.read_bytes()
    except OSError as e:
        logger.error(f"Could not read {source}: {e}")
        data = b""

    window.open_document(data, source.name)
    window.resize(1280, 900)
    window.show()
    sys.exit(app.exec_())


if __name__ == '__main__':
    main()
