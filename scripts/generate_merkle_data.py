"""
Build a merkle distribution from a leaves file.

Usage:
    python -m scripts.generate_merkle_data --name drop-01 --leaves data/sources/leaves.json

The leaves file maps claimant identities (32-byte hex) to their cumulative
entitlement, e.g. {"0x01...01": 1500, "0x02...02": "2500"}. Order is kept:
it decides each claimant's leaf index.
"""
import json
import os
import sys
import click
from config import Config
from distributor.merkle import create_merkle, parse_leaves


def print_statistics(amounts):
    amounts_list = sorted(amounts, reverse=True)
    total_users = len(amounts_list)
    min_amount = amounts_list[-1] if amounts_list else 0
    max_amount = amounts_list[0] if amounts_list else 0
    avg_amount = sum(amounts_list) / total_users if total_users > 0 else 0

    if total_users == 0:
        median_amount = 0
    elif total_users % 2 == 1:
        median_amount = amounts_list[total_users // 2]
    else:
        median_amount = (amounts_list[total_users // 2 - 1] + amounts_list[total_users // 2]) / 2

    click.echo("\n" + click.style("━" * 70, fg='cyan'))
    click.echo(click.style("  DISTRIBUTION STATISTICS", fg='cyan', bold=True))
    click.echo(click.style("━" * 70, fg='cyan'))
    click.echo(f"  Total Recipients:  {total_users:,}")
    click.echo(f"  Maximum Amount:    {max_amount:,}")
    click.echo(f"  Average Amount:    {avg_amount:,.2f}")
    click.echo(f"  Median Amount:     {median_amount:,}")
    click.echo(f"  Minimum Amount:    {min_amount:,}")
    click.echo(click.style("━" * 70, fg='cyan'))


@click.command()
@click.option('--name', required=True, help='Drop name, used for the default output file.')
@click.option('--leaves', 'leaves_path', default=Config.LEAVES_FILE, show_default=True,
              help='JSON file mapping claimant hex to cumulative amount.')
@click.option('--output', 'output_path', default=None, help='Override the output path.')
@click.option('--description', default='', help='Name/description stored in the distribution file.')
@click.option('--yes', is_flag=True, help='Overwrite an existing output file without asking.')
def main(name, leaves_path, output_path, description, yes):
    if not os.path.exists(leaves_path):
        click.echo(f"Error: leaves file {leaves_path} not found")
        sys.exit(1)

    try:
        with open(leaves_path, 'r') as f:
            user_amount_data = json.load(f)
        leaves = parse_leaves(user_amount_data)
    except (TypeError, ValueError) as e:
        click.echo(f"Error: could not parse leaves: {e}")
        sys.exit(1)

    if not leaves:
        click.echo("Error: leaves file holds no claimants")
        sys.exit(1)

    merkle_output = output_path or Config.get_merkle_file(name)
    if os.path.exists(merkle_output) and not yes:
        click.echo(f"\n⚠️  WARNING: {merkle_output} already exists!")
        if not click.confirm('Overwrite existing merkle distribution?', default=False):
            click.echo("Cancelled.")
            return

    click.echo(f"Loaded {len(leaves)} claimants from {leaves_path}")

    try:
        distribution = create_merkle(leaves, name, description, output_path=merkle_output)
    except ValueError as e:
        click.echo(f"Error building distribution: {e}")
        sys.exit(1)

    click.echo(f"\n✓ Merkle distribution written to {merkle_output}")
    click.echo(f"✓ Merkle root: {distribution['merkle_root']}")
    click.echo(f"✓ {len(distribution['claims'])} claims generated")
    click.echo(f"✓ Token total: {int(distribution['token_total']):,}")

    print_statistics([leaf.amount for leaf in leaves])


if __name__ == '__main__':
    main()
