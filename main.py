import asyncio
import logging
import os
from logging.handlers import RotatingFileHandler
from datetime import datetime

from cadastro.config import AppConfig
from cadastro.ui.terminal import run_app

# Criar diretório de logs se não existir
log_dir = "logs"
os.makedirs(log_dir, exist_ok=True)

# Configuração central de logging
log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
date_format = "%Y-%m-%d %H:%M:%S"

root_logger = logging.getLogger()
root_logger.setLevel(logging.INFO)

# O terminal é a interface do app: no console, apenas avisos e erros
console_handler = logging.StreamHandler()
console_handler.setLevel(logging.WARNING)
console_handler.setFormatter(logging.Formatter(log_format, date_format))

# Handler para arquivo com rotação (máximo 10MB por arquivo, mantém 5 backups)
log_file = os.path.join(log_dir, "app.log")
file_handler = RotatingFileHandler(
    log_file,
    maxBytes=10 * 1024 * 1024,  # 10MB
    backupCount=5,
    encoding='utf-8'
)
file_handler.setLevel(logging.INFO)
file_handler.setFormatter(logging.Formatter(log_format, date_format))

root_logger.addHandler(console_handler)
root_logger.addHandler(file_handler)

# httpx loga cada requisição em INFO
logging.getLogger("httpx").setLevel(logging.WARNING)

logging.info(f"Logging configurado. Arquivo de log: {log_file}")
logging.info(f"Aplicação iniciada em {datetime.now().strftime(date_format)}")


def main() -> None:
    config = AppConfig.load_from_env()
    try:
        asyncio.run(run_app(config))
    except KeyboardInterrupt:
        logging.info("Aplicativo interrompido pelo usuário")


if __name__ == "__main__":
    main()
