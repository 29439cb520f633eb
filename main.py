from __future__ import annotations

import sys

from PySide6.QtWidgets import QApplication
from loguru import logger

from app.viewmodels.main_vm import MainVM
from app.views.main_window import MainWindow
from core.services.catalog_service import ImageCatalog
from core.services.history_service import HistoryRecorder
from core.services.session_engine import SessionEngine
from infrastructure.folder_scanner import scan_images
from infrastructure.image_service import ImageService
from infrastructure.json_store import JsonHistoryStore, JsonImageMetadataStore
from infrastructure.logging import init_logging
from infrastructure.paths import get_history_path, get_metadata_path, get_settings_path
from infrastructure.settings import JsonSettings, load_preferences, save_preferences


def build_main_vm(settings: JsonSettings) -> MainVM:
    """Wire the catalog, history, engine and view-model from the data directory."""
    prefs = load_preferences(settings)
    catalog = ImageCatalog(JsonImageMetadataStore(get_metadata_path()))
    history = HistoryRecorder(JsonHistoryStore(get_history_path()))
    engine = SessionEngine(catalog, history)
    vm = MainVM(
        catalog=catalog,
        history=history,
        engine=engine,
        scanner=scan_images,
        preferences=prefs,
        save_preferences=lambda p: save_preferences(settings, p),
    )
    vm.load_folder()
    return vm


def main() -> int:
    log_dir = init_logging()
    logger.info("Program started; logs in {}", log_dir)
    settings = JsonSettings(get_settings_path())

    app = QApplication(sys.argv)

    vm = build_main_vm(settings)
    img = ImageService(settings)
    win = MainWindow(vm=vm, image_service=img)
    win.statusBar().showMessage("Ready", 2000)
    win.show()

    code = app.exec()
    logger.info("Program closed")
    return code


if __name__ == "__main__":
    raise SystemExit(main())
