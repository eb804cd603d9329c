from pathlib import Path
from PIL import Image
from printpack.imaging.batch import generate_batch
from printpack.controllers.exporter import save_images
from printpack.models.settings import ExportSettings, ProcessingSettings, WatermarkSpec
from printpack.models.enums import WatermarkPosition

tmp = Path('poster_test')
tmp.mkdir(parents=True, exist_ok=True)
src = Image.new('RGB', (1200, 1800), (128, 128, 128))

settings = ProcessingSettings(jpeg_quality=0.9, default_dpi=150,
                              dpi_overrides={'2:3 Portrait|24x36 in': 100})
watermark = WatermarkSpec(text='© Example Shop', position=WatermarkPosition.REPEAT)

images = generate_batch(src, watermark, settings, progress_cb=lambda p: print(p.current, p.total, p.current_task))
saved, failed = save_images(images, ExportSettings(output_dir=tmp, shop_name='Example Shop', art_title='Grey'))
print('Saved:', saved, 'failed:', failed)
