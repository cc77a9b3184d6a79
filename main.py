#!/usr/bin/env python3
"""
Options Goal Tracker — headless monitor
Refreshes quotes on a schedule during market hours and logs portfolio and goal progress
"""

import logging
import os
import time

import schedule
from dotenv import load_dotenv

from tracker.config import MARKET_TIMEZONE
from tracker.goals import calculate_goal_progress
from tracker.models import PortfolioMetrics
from tracker.quotes.quote_book import QuoteBook
from tracker.service import TrackerService, get_service

logger = logging.getLogger(__name__)


class TrackerMonitor:
    """Scheduled quote refresh and P&L reporting"""

    def __init__(self, service: TrackerService, quote_book: QuoteBook | None = None):
        self.service = service
        self.quote_book = quote_book or QuoteBook()
        self.is_running = True

    def refresh_routine(self) -> None:
        """Refresh quotes (market hours only) and log the summary when anything changed."""
        try:
            self.service.reload()
            fetched = self.service.auto_refresh(self.quote_book)
            if fetched:
                self.log_summary()
        except Exception as e:
            logger.error(f"Error refreshing quotes: {e}", exc_info=True)

    def end_of_day_routine(self) -> None:
        """Final refresh of every open ticker after the close, then the daily summary."""
        try:
            self.service.reload()
            logger.info("=" * 60)
            logger.info("END OF DAY SUMMARY")
            logger.info("=" * 60)
            self.service.refresh_quotes(self.quote_book)
            self.log_summary()
        except Exception as e:
            logger.error(f"Error in end of day routine: {e}", exc_info=True)

    def log_summary(self) -> PortfolioMetrics:
        metrics = self.service.metrics(self.quote_book.all_quotes())
        logger.info(
            f"Open: {len(self.service.positions)} | Invested: ${metrics.total_invested:,.2f} | "
            f"Unrealized: ${metrics.unrealized_pnl:,.2f} | Realized: ${metrics.realized_pnl:,.2f} | "
            f"Total: ${metrics.total_pnl:,.2f} | Win rate: {metrics.win_rate:.0f}%"
        )
        for goal in self.service.goals:
            progress = calculate_goal_progress(metrics.total_pnl, goal.target_amount)
            logger.info(f"Goal '{goal.name}': {progress.percent_complete:.1f}% "
                        f"(${progress.remaining:,.0f} remaining)")
        return metrics

    def schedule_tasks(self) -> None:
        """Schedule all automated tasks"""
        schedule.every(1).minutes.do(self.refresh_routine)
        schedule.every().day.at("16:05", MARKET_TIMEZONE).do(self.end_of_day_routine)
        logger.info("Tasks scheduled")

    def run(self) -> None:
        """Main run loop"""
        try:
            self.schedule_tasks()
            self.service.refresh_quotes(self.quote_book)
            self.log_summary()

            logger.info("Monitor running. Press Ctrl+C to stop")
            while self.is_running:
                schedule.run_pending()
                time.sleep(1)

        except KeyboardInterrupt:
            logger.info("Shutdown requested...")
        finally:
            self.shutdown()

    def shutdown(self) -> None:
        self.is_running = False
        schedule.clear()
        logger.info("Monitor stopped")


def main():
    load_dotenv()
    os.makedirs('logs', exist_ok=True)
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler('logs/tracker.log'),
            logging.StreamHandler(),
        ]
    )
    TrackerMonitor(get_service()).run()


if __name__ == "__main__":
    main()
