"""FastAPI adapter exposing HTTP endpoints."""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Request, Response
from pydantic import BaseModel, Field

from dbutil.application.commands.install_schema_command import InstallSchemaCommand
from dbutil.domain.errors import DatabaseUtilError, LockTimeout
from dbutil.domain.services.connection_resolver import current_request_method
from dbutil.domain.value_objects.connection_profile import Intent
from dbutil.ports.input.database_service import DatabaseService


class InstallPayload(BaseModel):
  builders: List[str] = Field(..., min_length=1, description='Schema builders as module:callable references')
  lock_timeout: int = Field(default=10, ge=0, description='Seconds to wait for the install lock')

  model_config = {
    'json_schema_extra': {
      'examples': [
        {
          'builders': ['myapp.schema:declare_users', 'myapp.schema:declare_audit'],
          'lock_timeout': 10,
        }
      ]
    }
  }


class IntentEnum(str, Enum):
  read = 'read'
  write = 'write'


class FastAPIAdapter:
  def __init__(self, database_service: DatabaseService):
    self._database_service = database_service
    self.app = FastAPI(
      title='dbutil API',
      version='0.1.0',
      description='Connection profile lookup and schema installation for logical databases.',
    )
    self._configure_middleware()
    self._configure_routes()

  def _configure_middleware(self) -> None:
    @self.app.middleware('http')
    async def publish_request_method(request: Request, call_next):
      # GET requests resolve to replicas unless a route forces an intent.
      token = current_request_method.set(request.method)
      try:
        return await call_next(request)
      finally:
        current_request_method.reset(token)

  def _configure_routes(self) -> None:
    @self.app.post('/api/v1/databases/{name}/install', status_code=204, tags=['Schema'])
    def install_schema(name: str, payload: InstallPayload) -> Response:
      """Apply the declared schema delta; responds with an empty 204 on success."""
      try:
        command = InstallSchemaCommand.from_references(name, payload.builders, lock_timeout=payload.lock_timeout)
      except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
      try:
        self._database_service.install_schema(command)
      except LockTimeout as exc:
        raise HTTPException(status_code=409, detail=str(exc))
      except DatabaseUtilError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
      return Response(status_code=204)

    @self.app.get('/api/v1/databases/{name}/profile', tags=['Connections'])
    async def connection_profile(name: str, intent: Optional[IntentEnum] = None) -> dict:
      """Resolved connection parameters with the password masked."""
      try:
        profile = self._database_service.connection_profile(name, Intent(intent.value) if intent else None)
      except DatabaseUtilError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
      return profile.as_dict()

    @self.app.get('/health', tags=['Health'])
    async def health():
      """Health check endpoint."""
      return {'status': 'healthy'}
