# financas/config.py
import os
from dotenv import load_dotenv

load_dotenv()

# Configurações do Telegram
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN")

# Configurações do Supabase
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

# Usuário (auth.users.id) dono dos dados da casa
FINANCAS_USER_ID = os.getenv("FINANCAS_USER_ID")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Quantos meses à frente os custos fixos geram despesas pendentes
PENDING_HORIZON_MONTHS = int(os.getenv("PENDING_HORIZON_MONTHS", "24"))

# Responsável usado quando o pagamento não informa um
DEFAULT_RESPONSIBLE = os.getenv("DEFAULT_RESPONSIBLE", "Sistema")
