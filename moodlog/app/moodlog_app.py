# moodlog/app/moodlog_app.py
import asyncio
from dotenv import load_dotenv
import sys
import logging
import signal
from moodlog.api.fastapi_server import MoodLogAPIServer
from moodlog.config import AppConfig
from moodlog.di.dependencies import DependencyContainer
from moodlog.errors import MoodLogError

logger = logging.getLogger(__name__)

ENVIRONMENTS = ["development", "production"]

class MoodLogApplication:
    """Runs the mood log service: record store, reminders and the HTTP API"""

    def __init__(self, config: AppConfig, dependency_container: DependencyContainer,
                 status_interval: float = 3600):
        self.config = config
        self.dependency_container = dependency_container
        self.shutdown_event = asyncio.Event()
        self.status_interval = status_interval
        self.api_server = None
        self.status_task = None

    async def start(self):
        """Open stores, install reminders, serve the API until shutdown"""
        try:
            logger.info("🚀 Starting mood log application...")
            self.dependency_container.open()

            await self.apply_reminders()

            if self.config.API_ENABLED:
                self.api_server = MoodLogAPIServer(
                    self.dependency_container,
                    host=self.config.API_HOST,
                    port=self.config.API_PORT
                )
                await self.api_server.start_server()
                logger.info(f"  - API docs: http://localhost:{self.config.API_PORT}/docs")
            else:
                logger.info("🌐 HTTP API disabled")

            count = await self.dependency_container.get_sample_usecase().count_samples()
            logger.info(f"✅ Mood log started with {count} samples")

            self.status_task = asyncio.create_task(self._periodic_status_log())

            # Wait for shutdown signal
            await self.shutdown_event.wait()

        except Exception as e:
            logger.error(f"❌ Error starting application: {e}")
            raise
        finally:
            await self.shutdown()

    async def apply_reminders(self):
        """Install the configured reminder times; a refusal is logged, not fatal"""
        reminder_usecase = self.dependency_container.get_reminder_usecase()
        try:
            installed = await reminder_usecase.apply()
            logger.info(f"⏰ {len(installed)} daily reminders installed")
        except MoodLogError as e:
            logger.warning(f"⚠️  Reminders not installed: {e}")

    async def _periodic_status_log(self):
        """Log application status periodically"""
        while not self.shutdown_event.is_set():
            await asyncio.sleep(self.status_interval)
            try:
                status = await self.dependency_container.get_reminder_usecase().status()
                count = await self.dependency_container.get_sample_usecase().count_samples()
                logger.info(f"📊 Samples: {count}, reminders: {status['scheduled_daily']} "
                            f"({', '.join(status['slots'])}), notifications: {status['permission']}")
            except Exception as e:
                logger.error(f"Error in status logging: {e}")

    async def shutdown(self):
        """Gracefully shutdown the application"""
        logger.info("🛑 Shutting down mood log application...")

        if self.status_task:
            self.status_task.cancel()
            try:
                await self.status_task
            except asyncio.CancelledError:
                pass

        if self.api_server:
            try:
                await self.api_server.stop_server()
            except Exception as e:
                logger.error(f"Error stopping FastAPI server: {e}")

        await self.dependency_container.close()
        logger.info("👋 Mood log application shutdown complete")

    def signal_handler(self, signum, frame):
        """Handle shutdown signals"""
        logger.info(f"📡 Received signal {signum}, initiating graceful shutdown...")
        self.shutdown_event.set()


async def main():
    """Main application entry point"""
    env_version = "production"
    if len(sys.argv) > 1:
        if sys.argv[1] not in ENVIRONMENTS:
            print(f"❌ Environment version must be one of: {ENVIRONMENTS}")
            sys.exit(1)
        env_version = sys.argv[1]

    load_dotenv(f'.env.{env_version}')
    config = AppConfig.from_env()

    logging.basicConfig(
        level=config.log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger.info(f"🔧 Configuration loaded for environment: {env_version}")

    if not config.validate():
        logger.error("❌ Invalid configuration - cannot start application")
        sys.exit(1)

    try:
        dependency_container = DependencyContainer(config)
        app = MoodLogApplication(config, dependency_container)

        # Set up signal handlers for graceful shutdown
        loop = asyncio.get_running_loop()
        for sig in [signal.SIGTERM, signal.SIGINT]:
            loop.add_signal_handler(sig, app.signal_handler, sig, None)

        await app.start()

    except KeyboardInterrupt:
        logger.info("⌨️  Application interrupted by user")
    except Exception as e:
        logger.error(f"💥 Application error: {e}")
        sys.exit(1)
