"""
run_pipeline.py

Run the whole storm impact analysis, in order:
download -> preprocess -> summary statistics -> bar charts -> report

Example usage:
python run_pipeline.py --start-year 1996 --top-n 10

"""

import argparse
import os
import time

from dataset_generation import compute_summary_stats, download_storm_data, preprocess_storm_data
from dataset_generation.utils.logger import setup_logger, close_logger
from data_analysis import top_event_types_barchart, write_report


def parse_args(argv=None):
    """Parse command-line arguments.

    Returns
    -------
    argparse.Namespace
    """
    parser = argparse.ArgumentParser(description="Run the storm impact analysis")
    parser.add_argument("--data-dir", type=str, default="data/")
    parser.add_argument("--figs-dir", type=str, default="figures/")
    parser.add_argument("--reports-dir", type=str, default="reports/")
    parser.add_argument("--url", type=str, default=download_storm_data.STORM_DATA_URL)
    parser.add_argument("--start-year", type=int, default=None)
    parser.add_argument("--end-year", type=int, default=None)
    parser.add_argument("--top-n", type=int, default=compute_summary_stats.TOP_N)
    parser.add_argument(
        "--overwrite", action="store_true", help="Download the raw data again"
    )
    return parser.parse_args(argv)


def main(argv=None):
    start_time = time.time()
    args = parse_args(argv)

    raw_filepath = os.path.join(args.data_dir, "raw", "StormData.csv.bz2")
    preprocessed_filepath = os.path.join(args.data_dir, "storm_events_preprocessed.csv")
    summary_dir = os.path.join(args.data_dir, "summary_stats")
    report_filepath = os.path.join(args.reports_dir, "storm_impact_report.md")

    logger, _ = setup_logger(log_filename="run_pipeline")
    logger.info("Starting script run_pipeline.py")

    try:
        logger.info("Step 1/5: download")
        download_storm_data.download_file(
            args.url, raw_filepath, overwrite=args.overwrite, logger=logger
        )

        logger.info("Step 2/5: preprocess")
        storm_df = preprocess_storm_data.read_storm_data(raw_filepath)
        storm_df = preprocess_storm_data.preprocess(
            storm_df, start_year=args.start_year, end_year=args.end_year, logger=logger
        )
        storm_df.to_csv(preprocessed_filepath, index=False)
        logger.info(f"File exported to: {preprocessed_filepath}")

        logger.info("Step 3/5: summary statistics")
        tables = compute_summary_stats.compute_summary_tables(
            storm_df, top_n=args.top_n, logger=logger
        )
        compute_summary_stats.export_summary_tables(tables, summary_dir, logger=logger)

        logger.info("Step 4/5: bar charts")
        summary_df = tables["summary_by_event_type"]
        figure_paths = top_event_types_barchart.make_figures(
            summary_df, figs_dir=args.figs_dir, num_events=args.top_n
        )

        logger.info("Step 5/5: report")
        report = write_report.build_report(
            summary_df,
            year_df=tables["summary_by_year"],
            figure_paths=figure_paths,
            top_n=args.top_n,
            report_dir=args.reports_dir,
        )
        write_report.save_report(report, report_filepath)
        print(report)

        elapsed = time.time() - start_time
        logger.info(f"Script complete. Elapsed time: {elapsed:.1f}s")
    finally:
        close_logger(logger)

    return report


if __name__ == "__main__":
    main()
