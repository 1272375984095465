# src/toml_cfg/core/engine.py
"""
Motor de resolução do toml-cfg.

Este módulo orquestra a resolução completa da configuração de um
componente em uma única invocação de build:

    Start
      → PathResolved | PathMissing
      → OverridesLoaded | OverridesAbsent
      → (StrictCheck)
      → FieldsResolved
      → Done

Estados terminais de falha:
    - StrictViolation (modo estrito sem fonte de overrides)
    - TypeMismatch (override incompatível, restrito a um campo)

Decisões arquiteturais:
    - O contexto de build é explícito (`BuildContext`); o motor nunca lê
      variáveis de ambiente nem argumentos de processo
    - A localização da raiz é uma estratégia plugável (`RootLocator`)
    - O arquivo de overrides é lido no máximo uma vez por resolução
    - Eventos e warnings são registrados em um `ResolutionTrace`,
      devolvido junto da `ResolvedConfig` (`ResolvedConfig.trace`)
    - Identidade de componente ausente equivale a componente ausente

Invariantes:
    - Cada campo declarado produz exatamente um campo resolvido
    - A ordem de declaração é preservada
    - Nenhuma configuração parcial é produzida em caso de erro fatal
    - Componente ausente na tabela se comporta exatamente como arquivo
      ausente (fora do modo estrito)

Limites explícitos:
    - Não emite estruturas finais (responsabilidade de `emit`)
    - Não observa mudanças no arquivo de overrides
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from .errors import SchemaDefinitionError, StrictModeViolationError
from .field import resolve_field, validate_field
from .hashing import compute_config_hash
from .overrides import DEFAULT_OVERRIDE_FILENAME, LoadStatus, OverrideLoadResult, load_overrides
from .paths import DEFAULT_SENTINEL, ExplicitRootLocator, PathHint, RootLocator, SentinelRootLocator
from .trace import ResolutionTrace
from .types import ResolvedConfig, ResolvedField, SchemaField, ValueSource


@dataclass(frozen=True)
class BuildContext:
    """
    Contexto explícito de uma invocação de build.

    Campos:
        - component_id: nome do componente sendo construído (None quando o
          build não informa identidade; tratado como componente ausente)
        - out_dir_hint: diretório de saída informado pelo build (opcional)
        - strict: exige que uma tabela de overrides seja encontrada
        - explicit_root: raiz do projeto informada diretamente (evita a caminhada)
        - override_filename: nome do arquivo de overrides na raiz
        - sentinel: nome do diretório raiz de saída do build
    """

    component_id: Optional[str]
    out_dir_hint: Optional[PathHint] = None
    strict: bool = False
    explicit_root: Optional[Path] = None
    override_filename: str = DEFAULT_OVERRIDE_FILENAME
    sentinel: str = DEFAULT_SENTINEL

    def root_locator(self) -> RootLocator:
        if self.explicit_root is not None:
            return ExplicitRootLocator(Path(self.explicit_root))
        return SentinelRootLocator(self.sentinel)


def _validate_schema(schema: Sequence[SchemaField]) -> None:
    seen: set[str] = set()
    for f in schema:
        if f.name in seen:
            raise SchemaDefinitionError(
                f"campo duplicado no schema: '{f.name}'",
                details={"field": f.name},
                hint="Cada campo deve ser declarado uma única vez.",
            )
        seen.add(f.name)
        validate_field(f)


def _load(root: Path, ctx: BuildContext) -> OverrideLoadResult:
    if ctx.component_id is None:
        # sem identidade nenhuma seção pode ser selecionada
        return OverrideLoadResult(
            status=LoadStatus.COMPONENT_MISSING,
            path=Path(root) / ctx.override_filename,
            reason="identidade do componente não informada pelo build",
        )
    return load_overrides(root, ctx.component_id, filename=ctx.override_filename)


def _strict_violation(ctx: BuildContext, stage: str, reason: str, path: Optional[Path]) -> StrictModeViolationError:
    if ctx.component_id is None:
        hint = "Informe a identidade do componente para que sua seção de overrides seja selecionada."
    else:
        hint = (
            f"Crie '{ctx.override_filename}' na raiz do projeto com uma seção "
            f"[{ctx.component_id}], ou informe a raiz explicitamente."
        )
    return StrictModeViolationError(
        f"modo estrito ativo, mas nenhuma configuração válida foi encontrada para "
        f"'{ctx.component_id}': {reason}",
        details={
            "component_id": ctx.component_id,
            "stage": stage,
            "path": str(path) if path is not None else None,
            "out_dir_hint": str(ctx.out_dir_hint) if ctx.out_dir_hint is not None else None,
        },
        hint=hint,
    )


def resolve_with_context(
    schema: Sequence[SchemaField],
    ctx: BuildContext,
    *,
    locator: Optional[RootLocator] = None,
    trace: Optional[ResolutionTrace] = None,
) -> ResolvedConfig:
    """
    Resolve todos os campos de `schema` para o componente de `ctx`.

    Args:
        schema: campos declarados, em ordem.
        ctx: contexto explícito de build.
        locator: estratégia de localização da raiz (padrão: derivada de `ctx`).
        trace: registro estruturado a ser preenchido (opcional).

    Returns:
        ResolvedConfig: configuração final, na ordem de declaração.

    Raises:
        MissingDefaultError / SchemaDefinitionError: schema inválido.
        StrictModeViolationError: modo estrito sem fonte de overrides.
        TypeKindMismatchError: override incompatível com o tipo de um campo.
    """
    trace = trace if trace is not None else ResolutionTrace(ctx.component_id)
    trace.log(stage="start", level="info", message="resolução iniciada", strict=ctx.strict, fields=len(schema))

    _validate_schema(schema)

    locator = locator if locator is not None else ctx.root_locator()
    root = locator.locate(ctx.out_dir_hint)

    overrides = None
    override_path: Optional[Path] = None

    if root is None:
        reason = f"raiz do projeto não encontrada a partir de {ctx.out_dir_hint!r}"
        trace.add_warning(stage="path_missing", message=reason)
        if ctx.strict:
            raise _strict_violation(ctx, "root_not_found", reason, None)
    else:
        trace.log(stage="path_resolved", level="info", message=f"raiz do projeto: {root}", root=str(root))

        result = _load(root, ctx)
        override_path = result.path

        if result.status is LoadStatus.LOADED:
            overrides = result.overrides
            trace.log(
                stage="overrides_loaded",
                level="info",
                message=f"overrides carregados de {result.path}",
                path=str(result.path),
                keys=sorted(str(k) for k in overrides),
            )
        else:
            trace.add_warning(
                stage="overrides_absent",
                message=result.reason,
                status=result.status.value,
                path=str(result.path),
            )
            if ctx.strict:
                raise _strict_violation(ctx, result.status.value, result.reason, result.path)

    if ctx.strict:
        trace.log(stage="strict_check", level="info", message="fonte de overrides presente")

    if overrides is not None:
        declared = {f.name for f in schema}
        for key in overrides:
            if key not in declared:
                trace.add_warning(
                    stage="unknown_override",
                    message=f"override '{key}' não corresponde a nenhum campo de '{ctx.component_id}' (ignorado)",
                    key=str(key),
                )

    fields: List[ResolvedField] = [resolve_field(f, overrides) for f in schema]
    trace.log(
        stage="fields_resolved",
        level="info",
        message=f"{len(fields)} campos resolvidos",
        overridden=[f.name for f in fields if f.source is ValueSource.OVERRIDE],
    )

    resolved = ResolvedConfig(
        component_id=ctx.component_id,
        fields=tuple(fields),
        override_path=override_path,
        fingerprint=compute_config_hash(fields),
        trace=trace,
    )
    trace.log(stage="done", level="info", message="resolução concluída", fingerprint=resolved.fingerprint)
    return resolved


def resolve_all(
    schema: Sequence[SchemaField],
    out_dir_hint: Optional[PathHint],
    component_id: Optional[str],
    strict: bool = False,
) -> ResolvedConfig:
    """Forma posicional do contrato: resolve com a caminhada padrão até `target`."""
    ctx = BuildContext(component_id=component_id, out_dir_hint=out_dir_hint, strict=strict)
    return resolve_with_context(schema, ctx)
