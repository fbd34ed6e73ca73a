import typing as t

import yaml
from pydantic import BaseModel, Field

N_POINTS = 100_000
N_NEIGHBOURS = 10
N_BENCHMARK_QUERIES = 100
RANDOM_SEED: int | None = None
PRINT_LOGS = True


class QueryConfigYamlModel(BaseModel):
    n_points: int = Field(default=N_POINTS, ge=0)
    k: int = Field(default=N_NEIGHBOURS, ge=1)
    n_queries: int = Field(default=N_BENCHMARK_QUERIES, ge=1)
    random_seed: t.Optional[int] = RANDOM_SEED
    target: t.Optional[
        t.Annotated[t.List[float], Field(min_length=3, max_length=3)]
    ] = None
    compare_with_linear_scan: bool = True
    print_logs: bool = PRINT_LOGS


def config_from_yaml(file_path: str) -> QueryConfigYamlModel:
    with open(file_path, "r") as stream:
        config = yaml.safe_load(stream)
    return QueryConfigYamlModel(**(config or {}))
