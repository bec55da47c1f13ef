from dataclasses import field, make_dataclass

from perfmon_compiler import CompilerConfig
from pmudb_config import ConfigBase

PmudbConfig = make_dataclass(
    cls_name="PmudbConfig",
    bases=(ConfigBase,),
    fields=[
        (
            "compiler_config",
            CompilerConfig,
            field(default=CompilerConfig()),
        ),
    ],
    frozen=True,
)


__all__ = [
  "PmudbConfig",
]
