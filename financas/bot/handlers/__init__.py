from .states import (
    ASKING_AMOUNT,
    ASKING_COMPETENCE,
    ASKING_CONFIRMATION,
    ASKING_PAYMENT_METHOD,
    CHOOSING_FIXED_COST,
)
from .cancel import cancel_command
from .handle_competence import handle_competence
from .handle_confirmation import handle_confirmation
from .handle_fixed_cost_choice import handle_fixed_cost_choice
from .handle_payment_amount import handle_payment_amount
from .handle_payment_method import handle_payment_method
from .start_payment import start_payment
