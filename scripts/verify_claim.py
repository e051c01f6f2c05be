"""
Self-check a claim before submitting it.

Usage:
    python -m scripts.verify_claim --distribution data/merkle/merkle_data_drop-01.json --claimant 0x01...01

Checks the claimant's amount and proof from the distribution file against
the file's root, or against --root when the published root is known.
"""
import os
import sys
import click
from eth_utils import encode_hex
from distributor.merkle import claim_from_distribution, load_distribution, to_bytes32, verify_claim


@click.command()
@click.option('--distribution', 'distribution_path', required=True, help='Merkle distribution JSON file.')
@click.option('--claimant', required=True, help='Claimant identity as 32-byte hex.')
@click.option('--root', default=None, help='Published root to check against (defaults to the file root).')
def main(distribution_path, claimant, root):
    if not os.path.exists(distribution_path):
        click.echo(f"Error: distribution file {distribution_path} not found")
        sys.exit(1)

    try:
        distribution = load_distribution(distribution_path)
        claimant = to_bytes32(claimant)
        root = to_bytes32(root or distribution['merkle_root'])
        claim = claim_from_distribution(distribution, claimant)
    except (KeyError, TypeError, ValueError) as e:
        click.echo(f"Error: {e}")
        sys.exit(1)

    if claim is None:
        click.echo(f"No claim found for {encode_hex(claimant)}")
        sys.exit(1)

    amount, proof = claim
    click.echo(f"Claimant: {encode_hex(claimant)}")
    click.echo(f"  Amount: {amount:,}")
    click.echo(f"  Proof length: {len(proof)}")
    click.echo(f"  Root: {encode_hex(root)}")

    if verify_claim(claimant, amount, proof, root):
        click.echo(click.style("✓ Proof is valid", fg='green'))
    else:
        click.echo(click.style("✗ Proof does not match root", fg='red'))
        sys.exit(1)


if __name__ == '__main__':
    main()
