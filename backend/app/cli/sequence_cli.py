# File: backend/app/cli/sequence_cli.py
# Version: v0.2.0
"""
Command-line interface for search, restriction digest and primer binding.

Every FASTA record is processed; results are printed as JSON (one object keyed
by record id).

Usage:
    python -m backend.app.cli.sequence_cli search --fasta plasmid.fa --query GAATTC [--mismatch 1] [--circular] [--seq-type aa]
    python -m backend.app.cli.sequence_cli digest --fasta plasmid.fa --enzymes EcoRI BamHI [--circular] [--gel]
    python -m backend.app.cli.sequence_cli bind --fasta plasmid.fa --primers primers.json [--linear]

primers.json is a list of objects: {"sequence": "...", "overhang": "", "name": "", "id": ""}.
Any other keys of a primer object are kept as its `meta`.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List

from Bio import SeqIO

from backend.app.core.sequence.alphabet import SeqType, calc_length
from backend.app.core.sequence.binding import Primer, find_all_binding_sites
from backend.app.core.sequence.digest import Part, digest
from backend.app.core.sequence.gel import agarose_digest
from backend.app.core.sequence.search import search

log = logging.getLogger("sequence_cli")


def _load_primers(path: Path) -> List[Primer]:
    with path.open("r", encoding="utf-8") as f:
        payload = json.load(f)
    if not isinstance(payload, list):
        raise ValueError(f"{path}: expected a JSON list of primers")
    fields = {"sequence", "overhang", "name", "id", "tm", "strict"}
    primers: List[Primer] = []
    for item in payload:
        known = {k: v for k, v in item.items() if k in fields}
        extra = {k: v for k, v in item.items() if k not in fields}
        primers.append(Primer(**known, meta=extra))
    return primers


def _run_search(args: argparse.Namespace, seq: str) -> Dict[str, Any]:
    result = search(args.query, args.mismatch, seq, args.circular, seq_type=SeqType(args.seq_type))
    return {
        "status": result.status.value,
        "message": result.message,
        "results": [dict(asdict(m), length=calc_length(m.start, m.end, len(seq))) for m in result.results],
    }


def _run_digest(args: argparse.Namespace, seq: str, name: str) -> Any:
    part = Part(seq=seq, circular=args.circular, name=name)
    if args.gel:
        return [asdict(b) for b in agarose_digest(args.enzymes, part)]
    return [dict(asdict(f), length=f.length) for f in digest(args.enzymes, part)]


def _run_bind(args: argparse.Namespace, seq: str, primers: List[Primer]) -> Any:
    sites = find_all_binding_sites(primers, seq, circular=not args.linear)
    return [dict(asdict(s), id=s.id) for s in sites]


def main() -> None:
    p = argparse.ArgumentParser(description="Sequence search / digest / primer binding CLI")
    p.add_argument("--log-level", dest="log_level", default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                   help="Logging level (default: WARNING)")
    sub = p.add_subparsers(dest="command", required=True)

    ps = sub.add_parser("search", help="Find a query on both strands")
    ps.add_argument("--fasta", required=True, type=Path)
    ps.add_argument("--query", required=True)
    ps.add_argument("--mismatch", type=int, default=0)
    ps.add_argument("--circular", action="store_true")
    ps.add_argument("--seq-type", dest="seq_type", default="dna", choices=[t.value for t in SeqType],
                    help="Alphabet of the record; aa searches one strand (default: dna)")

    pd = sub.add_parser("digest", help="Cut with restriction enzymes")
    pd.add_argument("--fasta", required=True, type=Path)
    pd.add_argument("--enzymes", required=True, nargs="+")
    pd.add_argument("--circular", action="store_true")
    pd.add_argument("--gel", action="store_true", help="Report agarose gel bands instead of fragments")

    pb = sub.add_parser("bind", help="Find primer binding sites")
    pb.add_argument("--fasta", required=True, type=Path)
    pb.add_argument("--primers", required=True, type=Path, help="JSON list of primers")
    pb.add_argument("--linear", action="store_true", help="Treat the vector as linear")

    args = p.parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level))
    log.info("command=%s fasta=%s", args.command, args.fasta)

    primers = _load_primers(args.primers) if args.command == "bind" else []
    out: Dict[str, Any] = {}
    for rec in SeqIO.parse(str(args.fasta), "fasta"):
        seq = str(rec.seq)
        log.info("Processing %s (%d bp)", rec.id, len(seq))
        if args.command == "search":
            out[rec.id] = _run_search(args, seq)
        elif args.command == "digest":
            out[rec.id] = _run_digest(args, seq, rec.id)
        else:
            out[rec.id] = _run_bind(args, seq, primers)

    if not out:
        log.error("No FASTA records found in %s", args.fasta)
        sys.exit(1)
    json.dump(out, sys.stdout, indent=2)
    sys.stdout.write("\n")


if __name__ == "__main__":
    main()
