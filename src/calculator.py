"""Command line interface to convert fee rates and price transaction weights.

Includes the following:
    - UNITS (constant): the fee rate denominations accepted as input.
    - parse_fee_rate (function): build a FeeRate from a number and a unit.
    - cli (click group): the `feerate` command and its subcommands `convert`,
        `fee` and `rate`.
    - main (function): the console script entry point.
"""

from __future__ import annotations

import sys

import click
import structlog

from datatypes.amount import Amount
from datatypes.fee_rate import FeeRate
from datatypes.serialization import dumps
from datatypes.weight import Weight
from log_config import configure_loggers
from utils.bitcoin import IntegerOverflow

LOGGER = structlog.stdlib.get_logger(__name__)

SAT_PER_KWU: str = "sat/kwu"
SAT_PER_VB: str = "sat/vb"
SAT_PER_KVB: str = "sat/kvb"

#: the fee rate denominations accepted as input
UNITS: tuple[str, ...] = (SAT_PER_KWU, SAT_PER_VB, SAT_PER_KVB)

unit_option = click.option(
    "-u",
    "--unit",
    type=click.Choice(UNITS, case_sensitive=False),
    default=SAT_PER_KWU,
    show_default=True,
    help="Denomination of the RATE argument.",
)


def parse_fee_rate(value: int, unit: str) -> FeeRate:
    """Build a fee rate from a raw number expressed in the given unit.

    Args:
        value: the raw fee rate.
        unit: one of UNITS.

    Raises:
        click.BadParameter: if the value isn't a 64-bit unsigned integer.
        click.ClickException: if the value overflows once converted to
            sat/kwu.
    """
    unit = unit.lower()
    try:
        if unit == SAT_PER_VB:
            fee_rate = FeeRate.from_sat_per_vb(value)
        elif unit == SAT_PER_KVB:
            fee_rate = FeeRate.from_sat_per_kvb(value)
        else:
            fee_rate = FeeRate.from_sat_per_kwu(value)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="RATE") from e

    if fee_rate is None:
        LOGGER.error("Fee rate overflow.", value=value, unit=unit)
        raise click.ClickException(f"{value} {unit} overflows sat/kwu.")

    LOGGER.debug(f"Parsed fee rate {fee_rate} sat/kwu.", value=value, unit=unit)
    return fee_rate


def echo(ctx: dict, data: dict) -> None:
    """Print the command result as JSON or as `key: value` lines."""
    if ctx.get("json"):
        click.echo(dumps(data))
        return
    for key, value in data.items():
        if isinstance(value, Amount):
            value = f"{value.to_sat()} sat ({value})"
        click.echo(f"{key}: {value}")


@click.group(help="Convert bitcoin fee rates and compute fees.")
@click.option(
    "--log-level",
    type=click.Choice(
        ["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False
    ),
    default="WARNING",
    show_default=True,
    help="Level of the log lines written to stderr.",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    envvar="FEERATE_JSON",
    help="Print results as a JSON object.",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str, as_json: bool) -> None:
    configure_loggers(
        log_level, json_logs=as_json, colors=sys.stderr.isatty()
    )
    ctx.obj = {"json": as_json}


@cli.command(help="Show RATE in every fee rate denomination.")
@click.argument("rate", type=int)
@unit_option
@click.pass_obj
def convert(ctx: dict, rate: int, unit: str) -> None:
    fee_rate: FeeRate = parse_fee_rate(rate, unit)
    echo(
        ctx,
        {
            SAT_PER_KWU: fee_rate,
            "sat/vb (floor)": fee_rate.to_sat_per_vb_floor(),
            "sat/vb (ceil)": fee_rate.to_sat_per_vb_ceil(),
            "display": f"{fee_rate:#}",
        },
    )


@cli.command(help="Compute the fee to pay for a weight at RATE.")
@click.argument("rate", type=int)
@unit_option
@click.option(
    "-w", "--weight", type=int, default=None, help="Weight in weight units."
)
@click.option(
    "-v", "--vbytes", type=int, default=None, help="Size in virtual bytes."
)
@click.pass_obj
def fee(
    ctx: dict,
    rate: int,
    unit: str,
    weight: int | None = None,
    vbytes: int | None = None,
) -> None:
    """Price a weight at a fee rate, rounding up to the next satoshi.

    Args:
        ctx: dictionary containing the options of the parent command.
        rate: the fee rate, expressed in `unit`.
        unit: the denomination of `rate`.
        weight: if set, the weight to pay for in weight units.
        vbytes: if set, the size to pay for in virtual bytes.
    """
    if (weight is None) == (vbytes is None):
        raise click.UsageError("Provide exactly one of --weight or --vbytes.")

    fee_rate: FeeRate = parse_fee_rate(rate, unit)
    try:
        if weight is not None:
            size: dict = {"weight": Weight.from_wu(weight)}
            amount = fee_rate.fee_wu(size["weight"])
        else:
            size = {"vbytes": vbytes}
            amount = fee_rate.fee_vb(vbytes)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e

    if amount is None:
        LOGGER.error("Fee overflow.", fee_rate=str(fee_rate), **size)
        raise click.ClickException("Fee doesn't fit in 64 bits.")

    echo(ctx, {"fee_rate": fee_rate, **size, "fee": amount})


@cli.command(help="Derive the fee rate paid by AMOUNT satoshis over WEIGHT.")
@click.argument("amount", type=int)
@click.argument("weight", type=int)
@click.option(
    "--round-up",
    is_flag=True,
    default=False,
    help="Round the fee rate up instead of truncating it.",
)
@click.pass_obj
def rate(ctx: dict, amount: int, weight: int, round_up: bool) -> None:
    try:
        paid = Amount.from_sat(amount)
        size = Weight.from_wu(weight)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e

    fee_rate: FeeRate | None
    if round_up:
        fee_rate = paid.checked_div_by_weight(size)
    else:
        try:
            fee_rate = paid / size
        except (ZeroDivisionError, IntegerOverflow) as e:
            LOGGER.debug(str(e))
            fee_rate = None

    if fee_rate is None:
        LOGGER.error(
            "Fee rate can't be derived.", amount=amount, weight=weight
        )
        raise click.ClickException(
            f"Can't derive a fee rate from {amount} sat over {weight} wu."
        )

    echo(ctx, {"fee_rate": fee_rate, "display": f"{fee_rate:#}"})


def main() -> None:
    cli(auto_envvar_prefix="FEERATE")


if __name__ == "__main__":
    main()
