# --- Estados da conversa de pagamento (/pagar) ---
CHOOSING_FIXED_COST = 0
ASKING_AMOUNT = 1
ASKING_COMPETENCE = 2
ASKING_PAYMENT_METHOD = 3
ASKING_CONFIRMATION = 4
