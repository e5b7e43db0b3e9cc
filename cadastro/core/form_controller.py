import asyncio
import logging
from typing import Any, Callable, Dict, Optional

from .auth_context import AuthContext
from .errors import AuthError, DocumentStoreError, PostalLookupError, store_failure_message
from .form_state import (
    FieldErrorMap,
    FormField,
    FormRecord,
    LOOKUP_FIELDS,
    SubmissionState,
    empty_field_errors,
)
from .normalizers import digits_only, normalize_state
from .ports import (
    SERVER_TIMESTAMP,
    Dialogs,
    DocumentStore,
    Navigator,
    PostalLookup,
    Screen,
    StoredDocument,
)
from .validators import REQUIRED_FIELDS, validate_field

logger = logging.getLogger(__name__)

Disposer = Callable[[], None]

# Campos de endereço que precisam estar preenchidos para o envio
ADDRESS_FIELDS = (
    FormField.STREET,
    FormField.NEIGHBORHOOD,
    FormField.NUMBER,
    FormField.CITY,
    FormField.STATE,
)


class FormController:
    """
    Controla o formulário de cadastro de usuário.

    Guarda os valores dos campos, os erros por campo, as mensagens gerais
    e os indicadores de carregamento, e orquestra as duas chamadas externas:
    busca de CEP e gravação no banco de documentos.

    Estados independentes:
        idle → submitting → idle   (envio)
        idle → looking_up → idle   (busca de CEP)
    """

    def __init__(
        self,
        postal_lookup: PostalLookup,
        document_store: DocumentStore,
        auth: AuthContext,
        navigator: Navigator,
        dialogs: Dialogs,
        collection: str = "usuarios",
        success_redirect_delay: float = 2.0,
    ) -> None:
        self._postal_lookup = postal_lookup
        self._document_store = document_store
        self._auth = auth
        self._navigator = navigator
        self._dialogs = dialogs
        self._collection = collection
        self._success_redirect_delay = success_redirect_delay
        self._pending_redirect: Optional[asyncio.TimerHandle] = None

        self.record = FormRecord()
        self.field_errors: FieldErrorMap = empty_field_errors()
        self.error_message = ""
        self.success_message = ""
        self.submission_state = SubmissionState.IDLE
        self.looking_up = False
        self.submit_attempted = False
        # ID do documento em edição (None = novo cadastro)
        self.editing_id: Optional[str] = None

    @property
    def submitting(self) -> bool:
        return self.submission_state == SubmissionState.SUBMITTING

    @property
    def can_lookup(self) -> bool:
        postal_code = self.record.postal_code
        return (
            not self.looking_up
            and len(postal_code) == 8
            and not self.field_errors[FormField.POSTAL_CODE]
        )

    @property
    def can_submit(self) -> bool:
        r = self.record
        return not self.submitting and bool(r.street and r.number and r.city and r.state)

    def visible_error(self, field: FormField) -> str:
        """
        Mensagem a exibir abaixo do campo: o erro de validação, ou o aviso
        de obrigatório quando já houve tentativa de envio com o campo vazio.
        """
        error = self.field_errors.get(field, "")
        if error:
            return error
        if self.submit_attempted and field in REQUIRED_FIELDS and not self.record.get(field):
            return validate_field(field, "")
        return ""

    def update_field(self, field: FormField, value: str) -> None:
        """
        Atualiza um campo e revalida apenas esse campo.
        """
        if field in (FormField.PHONE, FormField.POSTAL_CODE):
            value = digits_only(value)
        elif field == FormField.STATE:
            value = normalize_state(value)

        self.record.set(field, value)
        if field in self.field_errors:
            self.field_errors[field] = validate_field(field, value)

        # Limpa a mensagem de erro geral quando o usuário volta a digitar
        if self.error_message:
            self.error_message = ""

    def validate_form(self) -> bool:
        """
        Valida todos os campos obrigatórios e substitui o mapa de erros.
        """
        new_errors = empty_field_errors()
        for field in REQUIRED_FIELDS:
            new_errors[field] = validate_field(field, self.record.get(field))
        self.field_errors = new_errors
        return not any(new_errors.values())

    async def lookup_postal_code(self) -> None:
        """
        Busca o endereço do CEP digitado e preenche rua, bairro, cidade e UF.
        Número e complemento nunca são alterados.
        """
        if self.looking_up:
            logger.warning(
                f"Busca de CEP ignorada, outra em andamento: cep={self.record.postal_code}"
            )
            return

        postal_code = self.record.postal_code
        cep_error = validate_field(FormField.POSTAL_CODE, postal_code)
        if cep_error:
            self.field_errors[FormField.POSTAL_CODE] = cep_error
            self.error_message = cep_error
            return

        self.looking_up = True
        try:
            address = await self._postal_lookup.lookup(postal_code)
            if address is None or not address.street:
                logger.info(f"CEP não encontrado: cep={postal_code}")
                self.error_message = "CEP não encontrado ou inválido"
                self.field_errors[FormField.POSTAL_CODE] = "CEP não encontrado"
                return

            self.record.street = address.street
            self.record.neighborhood = address.neighborhood or ""
            self.record.city = address.city or ""
            self.record.state = address.state or ""
            for field in (FormField.POSTAL_CODE,) + LOOKUP_FIELDS:
                if field in self.field_errors:
                    self.field_errors[field] = validate_field(field, self.record.get(field))
            self.error_message = ""
            logger.debug(
                f"Endereço preenchido pelo CEP: cep={postal_code}, "
                f"cidade={self.record.city}, uf={self.record.state}"
            )
        except PostalLookupError as e:
            logger.error(
                f"Erro na busca do CEP: cep={postal_code}, reason={e.reason}",
                exc_info=True,
            )
            self.error_message = f"Erro ao buscar CEP: {e.reason or 'Falha na conexão'}"
            self.field_errors[FormField.POSTAL_CODE] = "Erro ao buscar CEP"
        finally:
            self.looking_up = False

    def build_payload(self) -> Dict[str, Any]:
        """
        Monta o documento a ser gravado a partir dos dados do formulário.
        """
        r = self.record
        address = {
            "cep": r.postal_code.strip(),
            "rua": r.street.strip(),
            "numero": r.number.strip(),
            "complemento": r.complement.strip(),
            "bairro": r.neighborhood.strip(),
            "cidade": r.city.strip(),
            "estado": r.state.strip(),
        }
        payload: Dict[str, Any] = {
            "nome": r.name.strip(),
            "idade": int(r.age),
            "cargo": r.role.strip(),
            "telefone": digits_only(r.phone),
            "email": r.email.strip(),
            "endereco": address,
        }
        if self.editing_id:
            payload["updatedAt"] = SERVER_TIMESTAMP
        else:
            payload["createdAt"] = SERVER_TIMESTAMP
        return payload

    async def submit(self) -> Optional[Disposer]:
        """
        Valida e grava o cadastro.

        Em caso de sucesso retorna uma função que cancela a navegação
        agendada para a lista de usuários; nos demais casos retorna None.
        """
        if self.submitting:
            logger.warning("Envio ignorado, outro envio em andamento")
            return None

        self.submit_attempted = True

        if not self.validate_form():
            self.error_message = "Corrija os erros no formulário antes de continuar"
            return None

        # Rua e bairro só chegam pela busca de CEP
        if any(not self.record.get(field) for field in ADDRESS_FIELDS):
            self.error_message = "Todos os campos obrigatórios do endereço devem ser preenchidos"
            return None

        self.submission_state = SubmissionState.SUBMITTING
        editing_id = self.editing_id
        user = self._auth.current_user
        uid = user.uid if user else None
        try:
            payload = self.build_payload()
            if editing_id:
                await self._document_store.update(self._collection, editing_id, payload)
                logger.info(
                    f"Documento atualizado: collection={self._collection}, "
                    f"id={editing_id}, uid={uid}"
                )
                self.success_message = "Usuário atualizado com sucesso!"
            else:
                document_id = await self._document_store.insert(self._collection, payload)
                logger.info(
                    f"Documento adicionado: collection={self._collection}, "
                    f"id={document_id}, uid={uid}"
                )
                self.success_message = "Usuário cadastrado com sucesso!"

            self._reset_form()
            return self._schedule_redirect()
        except DocumentStoreError as e:
            logger.error(
                f"Erro ao gravar cadastro: collection={self._collection}, "
                f"id={editing_id}, uid={uid}, error={type(e.failure).__name__}: {e}",
                exc_info=True,
            )
            action = "atualizar" if editing_id else "cadastrar"
            self.error_message = store_failure_message(e.failure, action)
            return None
        finally:
            self.submission_state = SubmissionState.IDLE

    def load_record(self, document: StoredDocument) -> None:
        """
        Preenche o formulário com um cadastro existente para edição.
        """
        data = document.data
        address = data.get("endereco") or {}
        age = data.get("idade")
        self.record = FormRecord(
            name=str(data.get("nome") or ""),
            age="" if age is None else str(age),
            role=str(data.get("cargo") or ""),
            phone=str(data.get("telefone") or ""),
            email=str(data.get("email") or ""),
            postal_code=str(address.get("cep") or ""),
            street=str(address.get("rua") or ""),
            neighborhood=str(address.get("bairro") or ""),
            number=str(address.get("numero") or ""),
            complement=str(address.get("complemento") or ""),
            city=str(address.get("cidade") or ""),
            state=str(address.get("estado") or ""),
        )
        self.field_errors = empty_field_errors()
        self.error_message = ""
        self.success_message = ""
        self.submit_attempted = False
        self.editing_id = document.id
        logger.debug(f"Cadastro carregado para edição: id={document.id}")

    async def clear_form(self) -> bool:
        confirmed = await self._dialogs.confirm(
            "Limpar formulário",
            "Deseja limpar todos os campos do formulário?",
            "Limpar",
        )
        if not confirmed:
            return False
        self._reset_form()
        return True

    async def cancel(self) -> bool:
        confirmed = await self._dialogs.confirm(
            "Cancelar cadastro",
            "Deseja cancelar o cadastro e perder os dados preenchidos?",
            "Sim, cancelar",
            "Não",
        )
        if not confirmed:
            return False
        self._navigator.go_back()
        return True

    async def logout(self) -> bool:
        confirmed = await self._dialogs.confirm("Logout", "Tem certeza que deseja sair?", "Sair")
        if not confirmed:
            return False
        try:
            await self._auth.sign_out()
            self._navigator.navigate(Screen.LOGIN)
            return True
        except AuthError as e:
            logger.error(f"Erro ao fazer logout: code={e.code.value}, error={e}", exc_info=True)
            await self._dialogs.alert("Erro", "Não foi possível fazer logout.")
            return False

    def close(self) -> None:
        """
        Chamado quando a tela é desmontada: cancela a navegação pendente.
        """
        if self._pending_redirect is not None:
            self._pending_redirect.cancel()
            self._pending_redirect = None

    def _reset_form(self) -> None:
        self.record = FormRecord()
        self.field_errors = empty_field_errors()
        self.error_message = ""
        self.submit_attempted = False
        self.editing_id = None

    def _schedule_redirect(self) -> Disposer:
        self.close()
        loop = asyncio.get_running_loop()
        handle = loop.call_later(self._success_redirect_delay, self._finish_success)
        self._pending_redirect = handle

        def dispose() -> None:
            handle.cancel()
            if self._pending_redirect is handle:
                self._pending_redirect = None

        return dispose

    def _finish_success(self) -> None:
        self._pending_redirect = None
        self.success_message = ""
        self._navigator.navigate(Screen.USERS_LIST)
