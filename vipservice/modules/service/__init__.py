from .vip_service import VipService, APP_NAME, VIP_QUEUE, SIGNAL_EXIT_CODE, FATAL_EXIT_CODE

__all__ = ['VipService', 'APP_NAME', 'VIP_QUEUE', 'SIGNAL_EXIT_CODE', 'FATAL_EXIT_CODE']
