"""
Interface de terminal do aplicativo de cadastro.

As telas apenas exibem o estado dos controladores e repassam as ações do
usuário; toda regra de negócio fica em `cadastro.core`. Os prompts do rich
são bloqueantes, então rodam em threads para que o loop de eventos continue
processando os timers (ex.: navegação após o cadastro).
"""
import asyncio
import logging
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from ..config import AppConfig
from ..core.auth_context import AuthContext
from ..core.auth_controller import AuthController
from ..core.form_controller import FormController
from ..core.form_state import FormField
from ..core.normalizers import format_phone_number, format_postal_code
from ..core.ports import AuthUser, Screen
from ..core.users_controller import UsersListController
from ..infra.firebase_auth import FirebaseIdentityProvider
from ..infra.viacep_client import ViaCepClient
from ..session import InMemoryAuthSessionStore, RedisAuthSessionStore
from ..storage.database import create_session_factory
from ..storage.document_store import SqlDocumentStore
from .navigation import StackNavigator

logger = logging.getLogger(__name__)

FIELD_LABELS = {
    FormField.NAME: "Nome completo",
    FormField.AGE: "Idade",
    FormField.ROLE: "Cargo",
    FormField.PHONE: "Telefone",
    FormField.EMAIL: "Email",
    FormField.POSTAL_CODE: "CEP",
    FormField.STREET: "Rua",
    FormField.NEIGHBORHOOD: "Bairro",
    FormField.NUMBER: "Número",
    FormField.COMPLEMENT: "Complemento",
    FormField.CITY: "Cidade",
    FormField.STATE: "Estado (UF)",
}

# Rua e bairro vêm apenas da busca de CEP
EDITABLE_FIELDS = [
    field for field in FormField
    if field not in (FormField.STREET, FormField.NEIGHBORHOOD)
]


class YesNoPrompt(Confirm):
    choices = ["s", "n"]
    validate_error_message = "[prompt.invalid]Responda s ou n"


class RichDialogs:
    """Diálogos de confirmação e alerta no terminal."""

    def __init__(self, console: Console) -> None:
        self._console = console

    async def confirm(
        self,
        title: str,
        message: str,
        confirm_label: str,
        cancel_label: str = "Cancelar",
    ) -> bool:
        self._console.print(Panel(escape(message), title=title, border_style="yellow"))
        return await asyncio.to_thread(
            YesNoPrompt.ask,
            f"{confirm_label} (s) / {cancel_label} (n)",
            console=self._console,
            default=False,
        )

    async def alert(self, title: str, message: str) -> None:
        self._console.print(Panel(escape(message), title=title, border_style="red"))


class TerminalApp:
    """
    Liga o estado de autenticação às telas: sem usuário mostra a tela de
    acesso, com usuário mostra o formulário de cadastro.
    """

    def __init__(
        self,
        auth: AuthContext,
        auth_controller: AuthController,
        form: FormController,
        users: UsersListController,
        navigator: StackNavigator,
        console: Console,
    ) -> None:
        self._auth = auth
        self._auth_controller = auth_controller
        self._form = form
        self._users = users
        self._navigator = navigator
        self._console = console
        self._running = False
        self._unsubscribe = None

    async def run(self) -> None:
        self._unsubscribe = self._auth.subscribe(self._on_auth_change)
        self._running = True
        try:
            while self._running:
                screen = self._navigator.current
                if screen == Screen.LOGIN:
                    await self._login_screen()
                elif screen == Screen.FORM:
                    await self._form_screen()
                else:
                    await self._users_screen()
        finally:
            self.close()

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._form.close()
        self._auth_controller.close()

    def _on_auth_change(self, user: Optional[AuthUser]) -> None:
        if user is None:
            self._navigator.reset(Screen.LOGIN)
        elif self._navigator.current == Screen.LOGIN:
            self._navigator.reset(Screen.FORM)

    async def _ask(self, prompt: str, **kwargs) -> str:
        return await asyncio.to_thread(Prompt.ask, prompt, console=self._console, **kwargs)

    def _print_messages(self, error: str, success: str = "") -> None:
        if error:
            self._console.print(f"[bold red]✗ {escape(error)}[/bold red]")
        if success:
            self._console.print(f"[bold green]✓ {escape(success)}[/bold green]")

    async def _login_screen(self) -> None:
        ctrl = self._auth_controller
        title = "Acesso ao Sistema" if ctrl.login_mode else "Cadastro"
        subtitle = "Faça login para continuar" if ctrl.login_mode else "Preencha os dados para se cadastrar"
        self._console.print(Panel(subtitle, title=title, border_style="blue"))
        self._print_messages(ctrl.error, ctrl.success)

        action_label = "Entrar" if ctrl.login_mode else "Criar conta"
        toggle_label = "Criar uma conta" if ctrl.login_mode else "Já tenho conta"
        choice = await self._ask(
            f"1) {action_label}  2) {toggle_label}  0) Sair",
            choices=["1", "2", "0"],
            default="1",
        )
        if choice == "0":
            self._running = False
            return
        if choice == "2":
            ctrl.toggle_mode()
            return

        ctrl.email = (await self._ask("Email", default=ctrl.email or None)) or ""
        ctrl.password = (await self._ask("Senha", password=True)) or ""
        if ctrl.login_mode:
            await ctrl.login()
        else:
            await ctrl.create_account()

    def _render_form(self) -> None:
        form = self._form
        user = self._auth.current_user
        title = "Editar Usuário" if form.editing_id else "Cadastro de Usuário"
        if user:
            title = f"{title} — {user.email}"

        table = Table(title=title, show_lines=False)
        table.add_column("#", justify="right")
        table.add_column("Campo")
        table.add_column("Valor")
        table.add_column("Erro", style="red")
        for index, field in enumerate(FormField, start=1):
            value = form.record.get(field)
            if field == FormField.PHONE:
                value = format_phone_number(value)
            elif field == FormField.POSTAL_CODE:
                value = format_postal_code(value)
            table.add_row(str(index), FIELD_LABELS[field], escape(value), form.visible_error(field))
        self._console.print(table)
        if form.looking_up:
            self._console.print("[cyan]Buscando CEP...[/cyan]")
        if form.submitting:
            self._console.print("[cyan]Enviando...[/cyan]")
        self._print_messages(form.error_message, form.success_message)

    async def _form_screen(self) -> None:
        form = self._form
        self._render_form()

        submit_label = "Salvar alterações" if form.editing_id else "Cadastrar"
        options = {"1": "Editar campo", "4": "Limpar", "5": "Cancelar", "6": "Ver usuários", "7": "Logout", "0": "Sair"}
        if form.can_lookup:
            options["2"] = "Buscar CEP"
        if form.can_submit:
            options["3"] = submit_label
        menu = "  ".join(f"{key}) {label}" for key, label in sorted(options.items()))
        choice = await self._ask(menu, choices=sorted(options), default="1")

        if choice == "1":
            await self._edit_field()
        elif choice == "2":
            await form.lookup_postal_code()
        elif choice == "3":
            await form.submit()
        elif choice == "4":
            await form.clear_form()
        elif choice == "5":
            await form.cancel()
        elif choice == "6":
            self._navigator.navigate(Screen.USERS_LIST)
        elif choice == "7":
            await form.logout()
        else:
            self._running = False

    async def _edit_field(self) -> None:
        choices = {str(list(FormField).index(f) + 1): f for f in EDITABLE_FIELDS}
        key = await self._ask("Número do campo", choices=sorted(choices, key=int))
        field = choices[key]
        current = self._form.record.get(field)
        value = await self._ask(FIELD_LABELS[field], default=current or None)
        self._form.update_field(field, value or "")

    async def _users_screen(self) -> None:
        users = self._users
        await users.refresh()

        table = Table(title="Usuários cadastrados")
        table.add_column("#", justify="right")
        table.add_column("Nome")
        table.add_column("Idade")
        table.add_column("Cargo")
        table.add_column("Cidade/UF")
        for index, document in enumerate(users.users, start=1):
            data = document.data
            address = data.get("endereco") or {}
            table.add_row(
                str(index),
                escape(str(data.get("nome", ""))),
                str(data.get("idade", "")),
                escape(str(data.get("cargo", ""))),
                escape(f"{address.get('cidade', '')}/{address.get('estado', '')}"),
            )
        self._console.print(table)
        self._print_messages(users.error_message)

        choice = await self._ask("e) Editar  d) Excluir  r) Atualizar  v) Voltar", choices=["e", "d", "r", "v"], default="v")
        if choice == "v":
            self._navigator.navigate(Screen.FORM)
            return
        if choice == "r" or not users.users:
            return

        positions = [str(i) for i in range(1, len(users.users) + 1)]
        position = await self._ask("Número do usuário", choices=positions)
        document = users.users[int(position) - 1]
        if choice == "e":
            users.edit(document)
        else:
            await users.delete(document)


def create_session_store(config: AppConfig):
    """
    Escolhe onde guardar a sessão de login: Redis se configurado, senão memória.
    """
    if config.redis_url and config.redis_url.strip():
        try:
            store = RedisAuthSessionStore(
                redis_url=config.redis_url,
                session_ttl_seconds=config.session_ttl_seconds,
            )
            logger.info("Sessão de login persistida no Redis")
            return store
        except Exception as e:
            logger.error(f"Erro ao inicializar RedisAuthSessionStore: {e}, usando memória como fallback")
    logger.info("Sessão de login em memória (REDIS_URL não configurado)")
    return InMemoryAuthSessionStore()


async def run_app(config: AppConfig, console: Optional[Console] = None) -> None:
    """
    Monta as dependências (adaptadores + controladores) e roda a interface.
    """
    console = console or Console()
    session_factory = create_session_factory(config.database_url, create_tables=config.env != "prod")
    document_store = SqlDocumentStore(session_factory)
    viacep = ViaCepClient(config.viacep_base_url, timeout_seconds=config.http_timeout_seconds)
    identity = FirebaseIdentityProvider(
        api_key=config.firebase_api_key,
        session_store=create_session_store(config),
        identity_base_url=config.identity_base_url,
        secure_token_base_url=config.secure_token_base_url,
        timeout_seconds=config.http_timeout_seconds,
    )

    navigator = StackNavigator(Screen.LOGIN)
    dialogs = RichDialogs(console)
    auth = AuthContext(identity)
    form = FormController(
        postal_lookup=viacep,
        document_store=document_store,
        auth=auth,
        navigator=navigator,
        dialogs=dialogs,
        collection=config.users_collection,
        success_redirect_delay=config.success_redirect_delay_seconds,
    )
    users = UsersListController(
        document_store=document_store,
        form=form,
        navigator=navigator,
        dialogs=dialogs,
        collection=config.users_collection,
    )
    auth_controller = AuthController(
        identity,
        min_password_length=config.min_password_length,
        success_clear_delay=config.auth_success_clear_delay_seconds,
    )
    app = TerminalApp(auth, auth_controller, form, users, navigator, console)

    auth.start()
    try:
        await identity.restore_session()
        await app.run()
    finally:
        auth.close()
        await viacep.aclose()
        await identity.aclose()
        logger.info("Aplicativo encerrado")
