import typing as t

import typer

import closest_points.config as config
from closest_points.algorithms.kd_tree import KDTree
from closest_points.baseline import linear_scan, same_neighbours, sorted_neighbours
from closest_points.data_models import Point
from closest_points.exceptions import InvalidNeighbourCountError, InvalidPointError
from closest_points.point_generation import generate_random_points
from closest_points.report import benchmark
from closest_points.utils.utils import KnnLog, KnnLogger

app = typer.Typer()


def load_config(config_file: t.Optional[str]) -> config.QueryConfigYamlModel:
    if config_file is None:
        return config.QueryConfigYamlModel()
    try:
        return config.config_from_yaml(config_file)
    except (OSError, ValueError) as e:
        raise typer.BadParameter(str(e), param_hint="--config")


@app.command()
def find(
    n_points: t.Annotated[t.Optional[int], typer.Option("--n-points", min=0)] = None,
    k: t.Annotated[t.Optional[int], typer.Option("--k")] = None,
    target: t.Annotated[
        t.Optional[t.Tuple[float, float, float]], typer.Option("--target")
    ] = None,
    seed: t.Annotated[t.Optional[int], typer.Option("--seed")] = None,
    config_file: t.Annotated[t.Optional[str], typer.Option("--config")] = None,
    no_compare: t.Annotated[bool, typer.Option("--no-compare")] = False,
    quiet: t.Annotated[bool, typer.Option("--quiet")] = False,
):
    """Find the k nearest neighbours of a target among random points."""
    cfg = load_config(config_file)
    n_points = cfg.n_points if n_points is None else n_points
    k = cfg.k if k is None else k
    seed = cfg.random_seed if seed is None else seed
    target = target if target is not None else cfg.target
    compare = cfg.compare_with_linear_scan and not no_compare
    logger = KnnLogger(printout=cfg.print_logs and not quiet, echo=typer.echo)

    points = generate_random_points(n_points, seed=seed)
    logger.append(KnnLog(f"Generated {n_points} random points.", 0))
    try:
        given_point = (
            Point(*target)
            if target is not None
            else generate_random_points(1, seed=None if seed is None else seed + 1)[0]
        )
        tree = KDTree.from_points(points)
        logger.append(KnnLog(f"Tree constructed, depth {tree.depth()}.", 1))
        neighbours = sorted_neighbours(tree.query(given_point, k))
    except (InvalidNeighbourCountError, InvalidPointError) as e:
        raise typer.BadParameter(str(e))
    logger.append(KnnLog(f"Found {len(neighbours)} nearest neighbours.", 2))

    typer.echo(f"given point: {given_point}")
    for neighbour in neighbours:
        typer.echo(
            f"Nearest Neighbour, value: {neighbour.distance}, point: {neighbour.point}"
        )

    if compare:
        expected = linear_scan(points, given_point, k)
        if not same_neighbours(neighbours, expected):
            logger.append(KnnLog("kd-tree result differs from linear scan.", 3))
            typer.echo("using linear scan:")
            for neighbour in expected:
                typer.echo(
                    f"Nearest Neighbour, value: {neighbour.distance}, point: {neighbour.point}"
                )
            raise typer.Exit(code=1)
        logger.append(KnnLog("kd-tree result matches linear scan.", 3))


@app.command()
def bench(
    n_points: t.Annotated[t.Optional[int], typer.Option("--n-points", min=0)] = None,
    n_queries: t.Annotated[
        t.Optional[int], typer.Option("--n-queries", min=1)
    ] = None,
    k: t.Annotated[t.Optional[int], typer.Option("--k")] = None,
    seed: t.Annotated[t.Optional[int], typer.Option("--seed")] = None,
    config_file: t.Annotated[t.Optional[str], typer.Option("--config")] = None,
    check: t.Annotated[bool, typer.Option("--check")] = False,
    quiet: t.Annotated[bool, typer.Option("--quiet")] = False,
):
    """Time tree construction and repeated searches, print a JSON report."""
    cfg = load_config(config_file)
    logger = KnnLogger(printout=cfg.print_logs and not quiet, echo=typer.echo)
    try:
        report = benchmark(
            n_points=cfg.n_points if n_points is None else n_points,
            n_queries=cfg.n_queries if n_queries is None else n_queries,
            k=cfg.k if k is None else k,
            random_seed=cfg.random_seed if seed is None else seed,
            compare_with_linear_scan=check,
            logger=logger,
        )
    except InvalidNeighbourCountError as e:
        raise typer.BadParameter(str(e), param_hint="--k")
    typer.echo(report.model_dump_json(indent=2))
    if not report.all_match:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
