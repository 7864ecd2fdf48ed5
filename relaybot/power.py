from dataclasses import dataclass

@dataclass
class PowerState:
    # enabled переключает админ (/power_on, /power_off), ready — после регистрации команд
    enabled: bool = True
    ready: bool = False
