import logging
from typing import List

from ..core.ports import Screen

logger = logging.getLogger(__name__)


class StackNavigator:
    """
    Pilha de telas. `navigate` para uma tela que já está na pilha volta até
    ela; caso contrário empilha a nova tela.
    """

    def __init__(self, initial: Screen = Screen.LOGIN) -> None:
        self._stack: List[Screen] = [initial]

    @property
    def current(self) -> Screen:
        return self._stack[-1]

    @property
    def stack(self) -> List[Screen]:
        return list(self._stack)

    def navigate(self, screen: Screen) -> None:
        if screen in self._stack:
            del self._stack[self._stack.index(screen) + 1:]
        else:
            self._stack.append(screen)
        logger.debug(f"Navegação: tela={screen.value}, pilha={len(self._stack)}")

    def go_back(self) -> None:
        if len(self._stack) > 1:
            self._stack.pop()
        logger.debug(f"Voltar: tela={self.current.value}")

    def reset(self, screen: Screen) -> None:
        self._stack = [screen]
        logger.debug(f"Navegação reiniciada: tela={screen.value}")
