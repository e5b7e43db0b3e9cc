from __future__ import annotations

from cadastro.core.ports import Screen
from cadastro.ui.navigation import StackNavigator


def test_navigate_pushes_new_screens():
    navigator = StackNavigator(Screen.FORM)
    navigator.navigate(Screen.USERS_LIST)
    assert navigator.current == Screen.USERS_LIST
    assert navigator.stack == [Screen.FORM, Screen.USERS_LIST]


def test_navigate_to_screen_in_stack_pops_back_to_it():
    navigator = StackNavigator(Screen.LOGIN)
    navigator.navigate(Screen.FORM)
    navigator.navigate(Screen.USERS_LIST)

    navigator.navigate(Screen.FORM)

    assert navigator.stack == [Screen.LOGIN, Screen.FORM]


def test_go_back_keeps_root():
    navigator = StackNavigator(Screen.LOGIN)
    navigator.navigate(Screen.FORM)
    navigator.go_back()
    navigator.go_back()
    assert navigator.stack == [Screen.LOGIN]


def test_reset():
    navigator = StackNavigator(Screen.FORM)
    navigator.navigate(Screen.USERS_LIST)
    navigator.reset(Screen.LOGIN)
    assert navigator.stack == [Screen.LOGIN]
