from .random_gen import SecureRandom
from .messages   import MessagesBundle

__all__ = ["SecureRandom", "MessagesBundle"]
