import logging
from typing import List

from .errors import DocumentStoreError, store_failure_message
from .form_controller import FormController
from .ports import Dialogs, DocumentStore, Navigator, Screen, StoredDocument

logger = logging.getLogger(__name__)


class UsersListController:
    """
    Lista os cadastros gravados e permite editar ou excluir cada um.
    """

    def __init__(
        self,
        document_store: DocumentStore,
        form: FormController,
        navigator: Navigator,
        dialogs: Dialogs,
        collection: str = "usuarios",
    ) -> None:
        self._document_store = document_store
        self._form = form
        self._navigator = navigator
        self._dialogs = dialogs
        self._collection = collection

        self.users: List[StoredDocument] = []
        self.loading = False
        self.error_message = ""

    async def refresh(self) -> None:
        self.loading = True
        try:
            self.users = await self._document_store.list(self._collection)
            self.error_message = ""
            logger.debug(f"Lista de usuários carregada: total={len(self.users)}")
        except DocumentStoreError as e:
            logger.error(
                f"Erro ao listar usuários: collection={self._collection}, error={e}",
                exc_info=True,
            )
            self.error_message = store_failure_message(e.failure, "listar")
        finally:
            self.loading = False

    async def delete(self, document: StoredDocument) -> bool:
        name = document.data.get("nome") or document.id
        confirmed = await self._dialogs.confirm(
            "Excluir usuário",
            f"Deseja excluir o cadastro de {name}?",
            "Excluir",
        )
        if not confirmed:
            return False

        try:
            await self._document_store.delete(self._collection, document.id)
            logger.info(f"Documento excluído: collection={self._collection}, id={document.id}")
        except DocumentStoreError as e:
            logger.error(
                f"Erro ao excluir usuário: collection={self._collection}, "
                f"id={document.id}, error={e}",
                exc_info=True,
            )
            self.error_message = store_failure_message(e.failure, "excluir")
            return False

        await self.refresh()
        return True

    def edit(self, document: StoredDocument) -> None:
        self._form.load_record(document)
        self._navigator.navigate(Screen.FORM)
