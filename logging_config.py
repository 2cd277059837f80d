"""
Настройка логирования приложения.

Пишет в консоль (и, по желанию, в файл) журнал дерева логгеров 'wireframe'.
Статистика каждого кадра (wireframe.painter, уровень DEBUG) при 60 кадрах/с
забивает вывод, поэтому она включается отдельно от общего уровня.
"""
import logging
import sys
from typing import Optional

FRAME_LOGGER = "wireframe.painter"


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None,
                  trace_frames: bool = False) -> None:
    """
    Настраивает логгер пространства имён 'wireframe'.

    Args:
        level: уровень логирования (logging.DEBUG, logging.INFO, ...)
        log_file: необязательный путь к файлу журнала.
        trace_frames: писать ли покадровую статистику рендеринга; без этого
            флага логгер кадров не опускается ниже INFO даже при level=DEBUG.
    """
    logger = logging.getLogger("wireframe")
    logger.setLevel(level)

    frame_logger = logging.getLogger(FRAME_LOGGER)
    frame_logger.setLevel(level if trace_frames else max(level, logging.INFO))

    # Повторный вызов не должен дублировать вывод
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info("Логирование: уровень %s, кадры %s, файл %s",
                logging.getLevelName(level), "вкл" if trace_frames else "выкл",
                log_file or "-")
