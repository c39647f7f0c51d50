#!/usr/bin/env python3
import argparse, json, logging, os
from flowstate.config import DEFAULT_CONFIG, SINGLE_SOURCE_CONFIG
from flowstate.grid import grid_to_records, grid_to_text
from flowstate.mapgen.generator import generate_level

def _config(args):
    return SINGLE_SOURCE_CONFIG if args.single else DEFAULT_CONFIG

def _dump(grid, fmt):
    if fmt == "json":
        return json.dumps(grid_to_records(grid), indent=1)
    return grid_to_text(grid) + "\n"

def cmd_emit(args):
    grid = generate_level(args.seed, _config(args))
    text = _dump(grid, args.format)
    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            f.write(text)
        print(f"Wrote {args.out}")
    else:
        print(text, end="")

def cmd_golden(args):
    os.makedirs(args.outdir, exist_ok=True)
    for i in range(args.count):
        seed = f"{args.prefix}{i:03d}"
        path = os.path.join(args.outdir, f"{seed}.txt")
        with open(path, "w", encoding="utf-8") as f:
            f.write(_dump(generate_level(seed, _config(args)), "text"))
    print(f"Wrote {args.count} levels to {args.outdir}")

def main():
    p = argparse.ArgumentParser()
    p.add_argument('--verbose', action='store_true')
    p.add_argument('--single', action='store_true', help='single-source variant')
    sub = p.add_subparsers(dest='cmd', required=True)
    p1 = sub.add_parser('emit')
    p1.add_argument('--seed', type=str, required=True)
    p1.add_argument('--format', choices=['text', 'json'], default='text')
    p1.add_argument('--out', type=str)
    p1.set_defaults(func=cmd_emit)
    p2 = sub.add_parser('golden')
    p2.add_argument('--outdir', type=str, required=True)
    p2.add_argument('--count', type=int, default=30)
    p2.add_argument('--prefix', type=str, default='golden-')
    p2.set_defaults(func=cmd_golden)
    args = p.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s: %(message)s')
    args.func(args)

if __name__ == '__main__':
    main()
