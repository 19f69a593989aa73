import logging
import sys
from pathlib import Path


def setup_logging(level: int = logging.INFO, log_dir: str = "logs"):
    """
    Настраивает глобальный логгер для приложения.
    - Выводит логи в консоль (stdout).
    - Сохраняет логи в файл logs/terrain.log.
    """
    log_path = Path(log_dir)
    log_path.mkdir(exist_ok=True)
    log_file = log_path / "terrain.log"

    logging.basicConfig(
        level=level,
        format="%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s:%(lineno)d | %(message)s",
        datefmt="%H:%M:%S",
        handlers=[
            logging.FileHandler(log_file, mode="w", encoding="utf-8"),
            logging.StreamHandler(sys.stdout),
        ],
        force=True,  # убирает старые хендлеры, чтобы не было дублей
    )

    logging.getLogger("terrain_engine").setLevel(level)
    logging.getLogger("numba").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)
